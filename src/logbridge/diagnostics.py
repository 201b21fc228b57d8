"""
Library-scoped logger for logbridge's own lifecycle events.

Events go to the stdlib logger "logbridge", which carries a NullHandler, so
nothing is printed unless the host application configures logging for it.
"""

from __future__ import annotations

import logging

import structlog

LIBRARY_LOGGER = "logbridge"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str = LIBRARY_LOGGER) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to a stdlib logger, independent of global structlog config."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )
