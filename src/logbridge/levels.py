"""
Severity scale shared by the engine, the sinks and the facade.
"""

from __future__ import annotations

from typing import Literal

from .errors import ConfigurationError

Level = Literal["silly", "debug", "info", "warn", "error"]

LEVELS: dict[str, int] = {
    "silly": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
}

_ALIASES = {"warning": "warn"}


def canonical_level(name: str) -> str | None:
    """Return the canonical level name, or None if it is not on the scale."""
    key = str(name).strip().lower()
    key = _ALIASES.get(key, key)
    return key if key in LEVELS else None


def parse_level(name: str, *, section: str | None = None, key: str = "level") -> str:
    """Canonicalize a configured level name, raising ConfigurationError if unknown."""
    level = canonical_level(name)
    if level is None:
        raise ConfigurationError(
            f"unknown level {name!r}, expected one of {', '.join(LEVELS)}",
            section=section,
            key=key,
        )
    return level


def admits(threshold: str, level: str) -> bool:
    """True when a record at `level` passes a `threshold` minimum."""
    return LEVELS[level] >= LEVELS[threshold]
