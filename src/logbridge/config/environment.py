"""
Environment-variable settings.

Used by `Logger.from_settings()`. The facade constructor itself never reads
process state; the execution mode is always passed in.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import DEFAULT_LOG_DIR, RemoteMode

Environment = Literal["development", "test", "production"]


class LogbridgeSettings(BaseSettings):
    """Facade settings read from LOGBRIDGE_* variables and `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="LOGBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Field(default="development", description="Execution mode")
    log_dir: str = Field(default=DEFAULT_LOG_DIR, description="Root directory for file sinks")
    level: str = Field(default="silly", description="Engine minimum level")
    json_mode: bool = Field(default=False, description="Render file sinks as JSON envelopes")
    remote_host: str | None = Field(default=None, description="Default remote collector host")
    remote_port: int | None = Field(default=None, description="Default remote collector port")
    remote_app_name: str | None = Field(default=None, description="Application name sent to the collector")
    remote_mode: RemoteMode = Field(default="udp4", description="Remote transport mode")

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        return self.env == "test"

    def to_config(self) -> dict[str, Any]:
        """Build a raw configuration tree; validation happens in `load_config`."""
        config: dict[str, Any] = {
            "logging": {
                "logDir": self.log_dir,
                "options": {"level": self.level, "json": self.json_mode},
            },
            "remotes": {},
        }
        # A half-configured remote must fail validation, not vanish.
        if self.remote_host or self.remote_port:
            config["remotes"]["default"] = {
                "host": self.remote_host,
                "port": self.remote_port,
                "appName": self.remote_app_name,
                "mode": self.remote_mode,
            }
        return config
