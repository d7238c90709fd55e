"""Ordered, uniquely keyed capability registries."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

from wizard_mcp.errors import DuplicateRegistrationError

EntryT = TypeVar("EntryT")


class Registry(Generic[EntryT]):
    """Append-only store mapping a unique key to a registered capability.

    Iteration order is registration order. Entries cannot be replaced or removed.
    Writes take a lock and reads work on a snapshot, so registering after the
    server started serving does not corrupt concurrent listings.
    """

    def __init__(self, kind: str) -> None:
        """Create an empty registry.

        Args:
            kind: Human-readable capability category used in error messages.

        """
        self.kind = kind
        self._entries: dict[str, EntryT] = {}
        self._lock = threading.Lock()

    def register(self, key: str, entry: EntryT) -> None:
        """Insert ``entry`` under ``key``.

        Args:
            key: Unique key for the entry.
            entry: Capability to store.

        Raises:
            DuplicateRegistrationError: If ``key`` is already registered.

        """
        with self._lock:
            if key in self._entries:
                raise DuplicateRegistrationError(self.kind, key)
            self._entries[key] = entry

    def lookup(self, key: str) -> EntryT | None:
        """Return the entry registered under ``key`` or ``None``."""
        with self._lock:
            return self._entries.get(key)

    def list(self) -> list[EntryT]:
        """Return every entry in registration order."""
        with self._lock:
            return list(self._entries.values())

    def keys(self) -> list[str]:
        """Return every key in registration order."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[EntryT]:
        return iter(self.list())
