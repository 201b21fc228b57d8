"""
Record renderers.

`format_line` is the human-readable rendering used by console and text file
sinks; `build_envelope` is the machine-readable rendering used by JSON file
sinks and remote collectors. Both read the message from the same event key.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from structlog.typing import EventDict

# Keys the engine adds itself; everything else is caller context.
RESERVED_KEYS = {"level", "message", "event", "logger", "timestamp"}


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601, millisecond precision, 'Z' suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _message(event_dict: EventDict) -> str:
    return str(event_dict.get("message", event_dict.get("event", "")))


def format_line(event_dict: EventDict) -> str:
    """Render `<timestamp> [<LEVEL>]: <message>`."""
    timestamp = event_dict.get("timestamp") or utc_timestamp()
    level = str(event_dict.get("level", "info")).upper()
    return f"{timestamp} [{level}]: {_message(event_dict)}"


def build_envelope(event_dict: EventDict, *, app_name: str | None = None) -> dict[str, Any]:
    """Render the structured envelope with explicit message/timestamp/fields keys."""
    fields: dict[str, Any] = {k: v for k, v in event_dict.items() if k not in RESERVED_KEYS}
    fields["level"] = event_dict.get("level", "info")
    if "logger" in event_dict:
        fields["logger"] = event_dict["logger"]
    if app_name:
        fields["app_name"] = app_name
    return {
        "message": _message(event_dict),
        "timestamp": event_dict.get("timestamp") or utc_timestamp(),
        "fields": fields,
    }
