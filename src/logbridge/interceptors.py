"""
Interceptors for routing standard library logging into a logger instance.
"""

from __future__ import annotations

import logging

from .core import LoggerInstance

_STDLIB_LEVELS = (
    (logging.ERROR, "error"),
    (logging.WARNING, "warn"),
    (logging.INFO, "info"),
    (logging.DEBUG, "debug"),
)


def stdlib_level(levelno: int) -> str:
    """Map a stdlib level number onto the silly..error scale (CRITICAL -> error)."""
    for threshold, name in _STDLIB_LEVELS:
        if levelno >= threshold:
            return name
    return "debug"


class BridgeHandler(logging.Handler):
    """
    Redirect standard library logging records to a logbridge instance.
    The record goes through the same normalization and suppression as a direct call.
    """

    def __init__(self, instance: LoggerInstance, level: int = logging.NOTSET):
        super().__init__(level)
        self.instance = instance

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.getMessage()
            if record.exc_info:
                msg = f"{msg}\n{self.formatException(record.exc_info)}" if msg else self.formatException(record.exc_info)
            self.instance.log(stdlib_level(record.levelno), msg, source=record.name)
        except Exception:
            self.handleError(record)

    def formatException(self, exc_info) -> str:
        formatter = self.formatter or logging.Formatter()
        return formatter.formatException(exc_info)


def attach_stdlib(
    instance: LoggerInstance,
    logger_name: str | None = None,
    level: int = logging.DEBUG,
) -> BridgeHandler:
    """Install a BridgeHandler on a stdlib logger (root by default)."""
    handler = BridgeHandler(instance)
    target = logging.getLogger(logger_name)
    target.addHandler(handler)
    target.setLevel(level)
    return handler
