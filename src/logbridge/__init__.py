"""
logbridge: a logging facade over file, console and remote collector sinks.

Every leveled call is normalized (strings pass through, exceptions keep their
diagnostic fields, anything else becomes sorted JSON), empty records are
dropped, and what remains fans out to the instance's sinks.

Library: structlog for the per-instance engine, orjson for serialization,
pydantic / pydantic-settings for configuration.
"""

from .core import DEFAULT_LOGGER, Logger, LoggerInstance, LoggerRegistry, construct, wrap
from .errors import ConfigurationError, LogbridgeError, SinkResourceError
from .normalize import is_suppressed, normalize

__all__ = [
    "DEFAULT_LOGGER",
    "ConfigurationError",
    "LogbridgeError",
    "Logger",
    "LoggerInstance",
    "LoggerRegistry",
    "SinkResourceError",
    "construct",
    "is_suppressed",
    "normalize",
    "wrap",
]
