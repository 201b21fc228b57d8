from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from logbridge.config import EngineOptions
from logbridge.engine import LevelGate, create_engine
from logbridge.sinks import BaseSink, SinkDescriptor


class ExplodingSink(BaseSink):
    def emit(self, event_dict: dict) -> None:
        raise OSError("disk full")

    def close(self) -> None:
        pass


def _sinks(recording, tmp_path: Path) -> list:
    return [
        recording(SinkDescriptor(kind="file", name="debug-log", level="debug", path=tmp_path / "d"), EngineOptions()),
        recording(SinkDescriptor(kind="file", name="info-log", level="info", path=tmp_path / "i"), EngineOptions()),
        recording(SinkDescriptor(kind="file", name="error-log", level="error", path=tmp_path / "e"), EngineOptions()),
    ]


def test_each_sink_gets_levels_at_or_above_its_threshold(recording, tmp_path: Path) -> None:
    debug, info, error = _sinks(recording, tmp_path)
    engine = create_engine("default", [debug, info, error], EngineOptions())

    engine.silly("s")
    engine.debug("d")
    engine.info("i")
    engine.warn("w")
    engine.error("e")

    assert debug.messages == ["d", "i", "w", "e"]
    assert info.messages == ["i", "w", "e"]
    assert error.messages == ["e"]


def test_engine_minimum_level(recording, tmp_path: Path) -> None:
    debug, _, _ = _sinks(recording, tmp_path)
    engine = create_engine("default", [debug], EngineOptions(level="warn"))

    engine.info("dropped")
    engine.warn("kept")

    assert debug.messages == ["kept"]


def test_event_shape_is_shared_across_sinks(recording, tmp_path: Path) -> None:
    _, info, error = _sinks(recording, tmp_path)
    engine = create_engine("sql", [info, error], EngineOptions())

    engine.error("boom", query="SELECT 1")

    first, second = info.events[0], error.events[0]
    assert first == second
    assert first is not second
    assert first["logger"] == "sql"
    assert first["level"] == "error"
    assert first["query"] == "SELECT 1"
    assert first["timestamp"].endswith("Z")
    assert "event" not in first


def test_failing_sink_does_not_block_others(recording, tmp_path: Path) -> None:
    _, info, _ = _sinks(recording, tmp_path)
    engine = create_engine("default", [ExplodingSink("broken"), info], EngineOptions())

    engine.info("still delivered")

    assert info.messages == ["still delivered"]


def test_level_gate_drops_unknown_methods() -> None:
    with pytest.raises(structlog.DropEvent):
        LevelGate("silly")(None, "verbose", {})
