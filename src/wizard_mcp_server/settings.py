from __future__ import annotations

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wizard_mcp.server import default_capabilities
from wizard_mcp.types import ServerInfo


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MCP_", extra="ignore")

    server_name: str = "Wizard MCP Server"
    server_version: str = "1.0.0"
    instructions: str = ""
    capabilities: dict[str, Any] = Field(default_factory=default_capabilities)
    logging_enabled: bool = True
    log_level: str = "INFO"
    log_json: bool = True

    @property
    def server_info(self) -> ServerInfo:
        return ServerInfo(name=self.server_name, version=self.server_version)
