"""
Leveled logging engine built on structlog.

Each logger instance gets its own wrapped logger and processor chain via
`structlog.wrap_logger`; nothing here touches the global structlog
configuration, so instances never share sinks.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from .config import EngineOptions
from .formatters import utc_timestamp
from .levels import admits, canonical_level
from .sinks import BaseSink

# =============================================================================
# Structlog Processors
# =============================================================================


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the canonical level name (the bound method name) to the event."""
    event_dict["level"] = canonical_level(method_name) or method_name
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event. Shared by every sink."""
    event_dict["timestamp"] = utc_timestamp()
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class LevelGate:
    """Drop events below the engine's minimum level."""

    def __init__(self, threshold: str):
        self.threshold = threshold

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        level = canonical_level(method_name)
        if level is None or not admits(self.threshold, level):
            raise structlog.DropEvent
        return event_dict


class LoggerName:
    def __init__(self, name: str):
        self.name = name

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["logger"] = self.name
        return event_dict


class MultiSinkRenderer:
    """Render log to every sink whose minimum level admits it."""

    def __init__(self, sinks: Sequence[BaseSink]):
        self.sinks = tuple(sinks)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        level = event_dict["level"]
        for sink in self.sinks:
            if not sink.accepts(level):
                continue
            try:
                # Each sink sees its own copy so one cannot alter another's record.
                sink.emit(dict(event_dict))
            except Exception:
                pass  # Fail silently to avoid breaking the application
        return ""


class _NopLogger:
    """Wrapped logger that discards the rendered output; the sinks already wrote it."""

    def msg(self, message: str) -> None:
        pass

    silly = debug = info = warn = warning = error = msg


# =============================================================================
# Engine Construction
# =============================================================================


def create_engine(name: str, sinks: Sequence[BaseSink], options: EngineOptions) -> Any:
    """Create a bound logger exposing one method per level."""
    processors = [
        LevelGate(options.level),
        add_level,
        add_timestamp,
        LoggerName(name),
        rename_event_key,
        MultiSinkRenderer(sinks),
    ]
    return structlog.wrap_logger(
        _NopLogger(),
        processors=processors,
        wrapper_class=structlog.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )


__all__ = ["LevelGate", "MultiSinkRenderer", "create_engine"]
