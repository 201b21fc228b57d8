"""
Exception hierarchy for logbridge.

Only construction raises. Log calls and sink delivery never propagate errors
back to the caller.
"""

from __future__ import annotations

from pathlib import Path


class LogbridgeError(Exception):
    """Base class for all logbridge errors."""


class ConfigurationError(LogbridgeError, ValueError):
    """A configuration section is missing a required key or holds an invalid value."""

    def __init__(self, message: str, *, section: str | None = None, key: str | None = None):
        self.section = section
        self.key = key
        location = ".".join(part for part in (section, key) if part)
        super().__init__(f"{location}: {message}" if location else message)


class SinkResourceError(LogbridgeError, OSError):
    """A sink could not acquire its resource (log directory, file)."""

    def __init__(self, message: str, *, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(f"{message} ({self.path})" if self.path else message)
