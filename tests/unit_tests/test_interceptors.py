"""
Routing standard library logging through a logger instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from logbridge import Logger
from logbridge.interceptors import BridgeHandler, attach_stdlib, stdlib_level


@pytest.fixture
def bridged(log_dir: Path, recording) -> Iterator[tuple[logging.Logger, dict]]:
    facade = Logger({"logging": {"logDir": str(log_dir)}}, environment="development", sink_factory=recording)
    handler = attach_stdlib(facade.log, "tests.bridge")
    std_logger = logging.getLogger("tests.bridge")
    std_logger.propagate = False
    yield std_logger, {sink.name: sink for sink in facade.log.sinks}
    std_logger.removeHandler(handler)
    std_logger.propagate = True


@pytest.mark.parametrize(
    ("levelno", "expected"),
    [
        (logging.CRITICAL, "error"),
        (logging.ERROR, "error"),
        (logging.WARNING, "warn"),
        (logging.INFO, "info"),
        (logging.DEBUG, "debug"),
        (5, "debug"),
    ],
)
def test_stdlib_level(levelno: int, expected: str) -> None:
    assert stdlib_level(levelno) == expected


def test_records_are_routed_with_source(bridged) -> None:
    std_logger, sinks = bridged

    std_logger.warning("disk %s", "full")

    event = sinks["debug-log"].events[0]
    assert event["message"] == "disk full"
    assert event["level"] == "warn"
    assert event["source"] == "tests.bridge"


def test_empty_records_are_suppressed(bridged) -> None:
    std_logger, sinks = bridged

    std_logger.info("")

    assert sinks["debug-log"].events == []


def test_exception_info_is_appended(bridged) -> None:
    std_logger, sinks = bridged

    try:
        raise ValueError("bad value")
    except ValueError:
        std_logger.exception("failed")

    (message,) = sinks["error-log"].messages
    assert message.startswith("failed\n")
    assert "Traceback" in message
    assert "ValueError: bad value" in message


def test_handler_is_a_logging_handler(log_dir: Path, recording) -> None:
    facade = Logger({"logging": {"logDir": str(log_dir)}}, environment="test", sink_factory=recording)
    assert isinstance(BridgeHandler(facade.log), logging.Handler)
