from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from logbridge.config import EngineOptions
from logbridge.sinks import BaseSink, SinkDescriptor


class RecordingSink(BaseSink):
    """Sink that keeps every event it is handed."""

    def __init__(self, descriptor: SinkDescriptor):
        super().__init__(descriptor.name, descriptor.level, descriptor.render)
        self.descriptor = descriptor
        self.events: list[dict[str, Any]] = []
        self.closed = False

    def emit(self, event_dict: dict[str, Any]) -> None:
        self.events.append(event_dict)

    def close(self) -> None:
        self.closed = True

    @property
    def messages(self) -> list[str]:
        return [event["message"] for event in self.events]


class RecordingFactory:
    """Sink factory that builds RecordingSinks and remembers them."""

    def __init__(self) -> None:
        self.sinks: list[RecordingSink] = []

    def __call__(self, descriptor: SinkDescriptor, options: EngineOptions) -> RecordingSink:
        sink = RecordingSink(descriptor)
        self.sinks.append(sink)
        return sink

    def total_calls(self) -> int:
        return sum(len(sink.events) for sink in self.sinks)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def recording() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def remote_section() -> dict[str, Any]:
    return {"host": "localhost", "port": 5025, "appName": "test", "mode": "udp4"}
