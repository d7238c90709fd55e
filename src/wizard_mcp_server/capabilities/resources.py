"""Server configuration resource and the user profile template."""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from typing import Any

from wizard_mcp.errors import ErrorCode, raise_mcp_error
from wizard_mcp.types import CallContext, Resource, ResourceTemplate, ServerInfo

PROFILE_TEMPLATE = "users://{userId}/profile"


@dataclass
class UserProfile:
    """Profile payload served by the user profile template."""

    user_id: str
    display_name: str
    email: str


class UserDirectory:
    """In-memory lookup of user profiles."""

    def __init__(self, profiles: list[UserProfile] | None = None) -> None:
        """Initialize the directory with optional seed profiles."""
        self._profiles: dict[str, UserProfile] = {}
        self._lock = threading.Lock()
        for profile in profiles or []:
            self.add(profile)

    def add(self, profile: UserProfile) -> None:
        """Add or replace a profile."""
        with self._lock:
            self._profiles[profile.user_id] = profile

    def get(self, user_id: str) -> UserProfile:
        """Return a profile or raise an MCP error for unknown users."""
        with self._lock:
            profile = self._profiles.get(user_id)
        if profile is None:
            raise_mcp_error(ErrorCode.INVALID_PARAMS, f"Unknown user '{user_id}'")
        return profile

    def user_ids(self) -> list[str]:
        """Return known user identifiers in insertion order."""
        with self._lock:
            return list(self._profiles)


def _json_contents(uri: str, payload: object) -> dict[str, Any]:
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": "application/json",
                "text": json.dumps(payload, indent=2),
            }
        ]
    }


def server_config_resource(server_info: ServerInfo) -> Resource:
    """Create the resource describing this server."""

    def read(uri: str, _context: CallContext) -> dict[str, Any]:
        return _json_contents(uri, server_info.to_dict())

    return Resource(
        uri="config://server",
        name="server-config",
        read_handler=read,
        metadata={
            "description": "Name and version of this MCP server.",
            "mimeType": "application/json",
        },
    )


def user_profile_template(directory: UserDirectory) -> ResourceTemplate:
    """Create the user profile resource template."""

    def read(
        uri: str, variables: dict[str, str], _context: CallContext
    ) -> dict[str, Any]:
        profile = directory.get(variables["userId"])
        return _json_contents(uri, asdict(profile))

    def list_profiles(_context: CallContext) -> list[dict[str, Any]]:
        return [
            {
                "uri": PROFILE_TEMPLATE.replace("{userId}", user_id),
                "name": f"profile-{user_id}",
            }
            for user_id in directory.user_ids()
        ]

    def complete_user_id(value: str, _context: CallContext) -> list[str]:
        return [
            user_id for user_id in directory.user_ids() if user_id.startswith(value)
        ]

    return ResourceTemplate(
        name="user-profile",
        uri_template=PROFILE_TEMPLATE,
        read_handler=read,
        metadata={
            "description": "Profile of a single user.",
            "mimeType": "application/json",
        },
        list_handler=list_profiles,
        completion_handlers={"userId": complete_user_id},
    )
