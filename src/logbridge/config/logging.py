"""
Facade configuration models.

The configuration tree is read once at construction and frozen afterwards.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..levels import parse_level

RemoteMode = Literal["udp", "udp4", "udp6", "tcp", "tcp4", "tcp6"]

DEFAULT_LOG_DIR = "./logs"

DEFAULT_ENGINE_OPTIONS: dict[str, Any] = {
    "level": "silly",
    "maxsize": 10_000_000,
    "maxFiles": 5,
    "json": False,
}

# Python-style option names accepted alongside the collector-style keys.
OPTION_ALIASES = {"max_bytes": "maxsize", "max_files": "maxFiles", "json_mode": "json"}


class RemoteSinkConfig(BaseModel):
    """One remote collector destination."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    host: str = Field(min_length=1, description="Collector hostname")
    port: int = Field(gt=0, lt=65536, description="Collector port")
    app_name: str | None = Field(default=None, alias="appName", description="Application identifier sent to the collector")
    mode: RemoteMode = Field(default="udp4", description="Transport mode")

    @field_validator("mode", mode="before")
    @classmethod
    def _lower_mode(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def protocol(self) -> Literal["udp", "tcp"]:
        return "tcp" if self.mode.startswith("tcp") else "udp"

    @property
    def ip_version(self) -> int | None:
        return int(self.mode[-1]) if self.mode[-1].isdigit() else None


class EngineOptions(BaseModel):
    """Merged engine options. Unknown keys are kept as extras."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    level: str = "silly"
    max_bytes: int = Field(default=10_000_000, alias="maxsize", ge=0)
    max_files: int = Field(default=5, alias="maxFiles", ge=0)
    json_mode: bool = Field(default=False, alias="json")

    @field_validator("level", mode="before")
    @classmethod
    def _canonical_level(cls, value: Any) -> str:
        return parse_level(value, section="logging.options")


class LoggingSection(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    log_dir: str = Field(default=DEFAULT_LOG_DIR, alias="logDir")
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("log_dir", mode="before")
    @classmethod
    def _default_when_empty(cls, value: Any) -> Any:
        return value or DEFAULT_LOG_DIR


class LogbridgeConfig(BaseModel):
    """Root configuration: a logging section plus named remote sink sections."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    logging: LoggingSection = Field(default_factory=LoggingSection)
    remotes: dict[str, RemoteSinkConfig] = Field(default_factory=dict)
