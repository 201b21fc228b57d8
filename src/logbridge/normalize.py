"""
Record normalization and empty-record suppression.

Every leveled call passes its argument through `normalize` before anything
reaches the engine. Strings pass through, exceptions keep their diagnostic
fields, anything else becomes sorted compact JSON. `is_suppressed` then drops
the two encodings that carry no information: "" and "{}".
"""

from __future__ import annotations

import json
import traceback
from dataclasses import dataclass
from typing import Any

import orjson

EMPTY_STRUCTURE = "{}"


@dataclass(frozen=True, slots=True)
class NormalizedMessage:
    """Canonical text for one call argument."""

    text: str
    is_string: bool


def _default(obj: Any) -> str:
    return str(obj)


def dumps(value: Any) -> str:
    """Deterministic compact JSON (sorted keys, unknown types via str())."""
    try:
        return orjson.dumps(value, default=_default, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS).decode()
    except orjson.JSONEncodeError:
        # orjson rejects integers outside 64 bits; json has no such limit.
        return json.dumps(value, default=_default, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def exception_fields(exc: BaseException) -> dict[str, Any]:
    """Collect the diagnostic fields of an exception, including its own attributes."""
    fields: dict[str, Any] = dict(vars(exc))
    fields["type"] = type(exc).__name__
    fields["message"] = str(exc)
    fields["args"] = list(exc.args)
    if exc.__traceback__ is not None:
        fields["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return fields


def _placeholder(value: Any) -> str:
    return f"<unserializable {type(value).__name__}>"


def normalize(value: Any) -> NormalizedMessage:
    """Convert an arbitrary log-call argument into its canonical text. Never raises."""
    if isinstance(value, str):
        return NormalizedMessage(value, True)
    if value is None:
        return NormalizedMessage("", False)
    try:
        if isinstance(value, BaseException):
            return NormalizedMessage(dumps(exception_fields(value)), False)
        return NormalizedMessage(dumps(value), False)
    except Exception:
        return NormalizedMessage(_placeholder(value), False)


def is_suppressed(text: str) -> bool:
    """True for the empty string and the empty-structure encoding only."""
    return text == "" or text == EMPTY_STRUCTURE
