"""
logbridge configuration.

Accepts either a `LogbridgeConfig` or a plain mapping shaped like

    {
        "logging": {"logDir": "./logs", "options": {"level": "info"}},
        "remotes": {"default": {"host": ..., "port": ..., "appName": ..., "mode": "udp4"}},
    }

Top-level `logstash`, `logstashSQL` and `logstashRequests` sections are
accepted as the `default`, `sql` and `requests` remotes respectively.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from .environment import Environment, LogbridgeSettings
from .logging import (
    DEFAULT_ENGINE_OPTIONS,
    DEFAULT_LOG_DIR,
    OPTION_ALIASES,
    EngineOptions,
    LogbridgeConfig,
    LoggingSection,
    RemoteSinkConfig,
)

LEGACY_REMOTE_KEYS = {
    "logstash": "default",
    "logstashSQL": "sql",
    "logstashRequests": "requests",
}


def config_error(exc: ValidationError, section: str) -> ConfigurationError:
    """Translate the first pydantic error into a ConfigurationError naming section and key."""
    error = exc.errors()[0]
    key = ".".join(str(part) for part in error.get("loc", ()))
    return ConfigurationError(error.get("msg", str(exc)), section=section, key=key or None)


def load_remote(section: str, value: RemoteSinkConfig | Mapping[str, Any]) -> RemoteSinkConfig:
    """Validate one remote sink section."""
    if isinstance(value, RemoteSinkConfig):
        return value
    if not isinstance(value, Mapping):
        raise ConfigurationError("remote sink section must be a mapping", section=section)
    try:
        return RemoteSinkConfig.model_validate(dict(value))
    except ValidationError as exc:
        raise config_error(exc, section) from exc


def load_config(config: LogbridgeConfig | Mapping[str, Any] | None) -> LogbridgeConfig:
    """Validate a raw configuration tree into a frozen `LogbridgeConfig`."""
    if isinstance(config, LogbridgeConfig):
        return config
    raw = dict(config or {})

    remotes: dict[str, RemoteSinkConfig] = {}
    for legacy, name in LEGACY_REMOTE_KEYS.items():
        if raw.get(legacy) is not None:
            remotes[name] = load_remote(legacy, raw[legacy])
    for name, section in (raw.get("remotes") or {}).items():
        remotes[name] = load_remote(f"remotes.{name}", section)

    try:
        logging_section = LoggingSection.model_validate(raw.get("logging") or {})
    except ValidationError as exc:
        raise config_error(exc, "logging") from exc

    return LogbridgeConfig(logging=logging_section, remotes=remotes)


__all__ = [
    "DEFAULT_ENGINE_OPTIONS",
    "DEFAULT_LOG_DIR",
    "EngineOptions",
    "OPTION_ALIASES",
    "Environment",
    "LEGACY_REMOTE_KEYS",
    "LogbridgeConfig",
    "LogbridgeSettings",
    "LoggingSection",
    "RemoteSinkConfig",
    "load_config",
    "load_remote",
    "config_error",
]
