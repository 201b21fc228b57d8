"""
Transport builder: turns one logger instance's configuration into its
ordered list of sink descriptors and its merged engine options.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import (
    DEFAULT_ENGINE_OPTIONS,
    OPTION_ALIASES,
    EngineOptions,
    Environment,
    RemoteSinkConfig,
    config_error,
)
from .diagnostics import get_logger
from .errors import SinkResourceError
from .sinks import SinkDescriptor

logger = get_logger()

# Modes in which the console and debug file are left out.
QUIET_ENVIRONMENTS = frozenset({"production", "test"})


def ensure_log_dir(log_dir: str | Path) -> Path:
    """Create the log directory if needed. Idempotent."""
    path = Path(log_dir)
    if path.is_dir():
        return path
    logger.info("creating log folder", path=str(path))
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SinkResourceError(f"cannot create log directory: {exc.strerror or exc}", path=path) from exc
    return path


def _canonical_keys(layer: Mapping[str, Any]) -> dict[str, Any]:
    return {OPTION_ALIASES.get(k, k): v for k, v in layer.items()}


def merge_options(*layers: Mapping[str, Any] | None) -> EngineOptions:
    """Merge option layers over the defaults; later layers win on key conflicts."""
    merged: dict[str, Any] = dict(DEFAULT_ENGINE_OPTIONS)
    for layer in layers:
        if layer:
            merged.update(_canonical_keys(layer))
    try:
        return EngineOptions.model_validate(merged)
    except ValidationError as exc:
        raise config_error(exc, "logging.options") from exc


def build_transports(
    log_dir: str | Path,
    environment: Environment,
    remote: RemoteSinkConfig | None = None,
    *,
    json_mode: bool = False,
    prefix: str = "",
) -> list[SinkDescriptor]:
    """
    Build the ordered sink descriptors for one logger instance.

    Args:
        log_dir: Root directory for file sinks (created if absent)
        environment: Execution mode; console and debug file only outside production/test
        remote: Remote collector section for this instance, if any
        json_mode: Render file sinks as JSON envelopes instead of text lines
        prefix: Prepended to file names so several instances can share a directory
    """
    root = ensure_log_dir(log_dir)
    render = "json" if json_mode else "text"
    descriptors: list[SinkDescriptor] = []

    if environment not in QUIET_ENVIRONMENTS:
        descriptors.append(SinkDescriptor(kind="console", name="console", level="debug"))
        descriptors.append(
            SinkDescriptor(kind="file", name="debug-log", level="debug", render=render, path=root / f"{prefix}debug.log")
        )

    descriptors.append(
        SinkDescriptor(kind="file", name="info-log", level="info", render=render, path=root / f"{prefix}info.log")
    )
    descriptors.append(
        SinkDescriptor(kind="file", name="error-log", level="error", render=render, path=root / f"{prefix}error.log")
    )

    if remote is not None:
        descriptors.append(SinkDescriptor(kind="remote", name="remote", level="info", render="json", remote=remote))

    return descriptors
