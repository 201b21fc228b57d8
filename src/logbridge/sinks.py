"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import logging
import logging.handlers
import queue
import socket
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from structlog.typing import EventDict

from .config import EngineOptions, RemoteSinkConfig
from .diagnostics import get_logger
from .errors import SinkResourceError
from .formatters import build_envelope, format_line
from .levels import admits, parse_level
from .normalize import dumps

logger = get_logger()

SinkKind = Literal["console", "file", "remote"]
RenderMode = Literal["text", "json"]


# =============================================================================
# Sink Descriptor
# =============================================================================


class SinkDescriptor(BaseModel):
    """One configured output destination. Fixed once a logger instance is built."""

    model_config = ConfigDict(frozen=True)

    kind: SinkKind
    name: str
    level: str = "info"
    render: RenderMode = "text"
    path: Path | None = None
    remote: RemoteSinkConfig | None = None


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    def __init__(self, name: str, level: str = "info", render: RenderMode = "text"):
        self.name = name
        self.level = parse_level(level, section=f"sinks.{name}")
        self.render = render

    def accepts(self, level: str) -> bool:
        return admits(self.level, level)

    def render_event(self, event_dict: EventDict) -> str:
        if self.render == "json":
            return dumps(build_envelope(event_dict))
        return format_line(event_dict)

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, level={self.level!r})"


class ConsoleSink(BaseSink):
    """Standard output sink rendering one text line per record."""

    def __init__(self, name: str = "console", level: str = "debug", render: RenderMode = "text", stream: Any = None):
        super().__init__(name, level, render)
        self._stream = stream or sys.stdout
        self._lock = threading.Lock()

    def emit(self, event_dict: EventDict) -> None:
        output = self.render_event(event_dict)
        with self._lock:
            self._stream.write(output + "\n")
            self._stream.flush()

    def close(self) -> None:
        pass


class FileSink(BaseSink):
    """Append-only file sink. Rotation is left to RotatingFileHandler."""

    def __init__(
        self,
        path: str | Path,
        name: str = "file",
        level: str = "info",
        render: RenderMode = "text",
        max_bytes: int = 10_000_000,
        backup_count: int = 5,
    ):
        super().__init__(name, level, render)
        self.path = Path(path)
        try:
            self._handler = logging.handlers.RotatingFileHandler(
                self.path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            raise SinkResourceError(f"cannot open file sink {name!r}: {exc.strerror or exc}", path=self.path) from exc
        self._handler.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, event_dict: EventDict) -> None:
        record = logging.makeLogRecord({"msg": self.render_event(event_dict), "levelno": logging.INFO})
        self._handler.handle(record)

    def close(self) -> None:
        self._handler.close()


class RemoteSink(BaseSink):
    """Best-effort JSON shipping to a remote collector over UDP or TCP.

    Records are queued and sent from a daemon thread, so `emit` never waits
    on the network. Any delivery failure drops that record and increments
    `dropped`.

    Args:
        remote: Collector host/port/appName/mode
        queue_size: Records buffered before new ones are dropped
        timeout: Socket timeout for TCP connect and send
    """

    def __init__(
        self,
        remote: RemoteSinkConfig,
        name: str = "remote",
        level: str = "info",
        queue_size: int = 10_000,
        timeout: float = 2.0,
    ):
        super().__init__(name, level, "json")
        self.remote = remote
        self.dropped = 0
        self._dropped_lock = threading.Lock()
        self._timeout = timeout
        self._family = socket.AF_INET6 if remote.ip_version == 6 else socket.AF_INET
        self._sock: socket.socket | None = None
        self._queue: queue.Queue[bytes | None] = queue.Queue(maxsize=queue_size)
        self._closed = False
        self._worker = threading.Thread(target=self._process, name=f"logbridge-{name}", daemon=True)
        self._worker.start()

    def encode(self, event_dict: EventDict) -> bytes:
        envelope = build_envelope(event_dict, app_name=self.remote.app_name)
        return dumps(envelope).encode()

    def emit(self, event_dict: EventDict) -> None:
        if self._closed:
            self._count_drop()
            return
        try:
            self._queue.put_nowait(self.encode(event_dict))
        except queue.Full:
            self._count_drop()

    def _count_drop(self) -> None:
        with self._dropped_lock:
            self.dropped += 1

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued record has been handed to the socket."""
        done = threading.Event()

        def _wait() -> None:
            self._queue.join()
            done.set()

        threading.Thread(target=_wait, daemon=True).start()
        return done.wait(timeout)

    def _process(self) -> None:
        while True:
            payload = self._queue.get()
            try:
                if payload is None:
                    return
                self._send(payload)
            except Exception:
                self._count_drop()
                self._disconnect()
            finally:
                self._queue.task_done()

    def _connect(self) -> socket.socket:
        if self._sock is not None:
            return self._sock
        if self.remote.protocol == "udp":
            sock = socket.socket(self._family, socket.SOCK_DGRAM)
        else:
            sock = socket.create_connection((self.remote.host, self.remote.port), timeout=self._timeout)
        self._sock = sock
        return sock

    def _send(self, payload: bytes) -> None:
        sock = self._connect()
        if self.remote.protocol == "udp":
            sock.sendto(payload, (self.remote.host, self.remote.port))
        else:
            sock.sendall(payload + b"\n")

    def _disconnect(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put(None, timeout=self._timeout)
        except queue.Full:
            logger.warning("remote sink queue full at shutdown", sink=self.name, pending=self._queue.qsize())
        self._worker.join(timeout=self._timeout)
        self._disconnect()


# =============================================================================
# Factory
# =============================================================================

SinkFactory = Callable[[SinkDescriptor, EngineOptions], BaseSink]


def create_sink(descriptor: SinkDescriptor, options: EngineOptions) -> BaseSink:
    """Instantiate the sink a descriptor describes."""
    if descriptor.kind == "console":
        sink: BaseSink = ConsoleSink(name=descriptor.name, level=descriptor.level, render=descriptor.render)
    elif descriptor.kind == "file":
        if descriptor.path is None:
            raise SinkResourceError(f"file sink {descriptor.name!r} has no path")
        sink = FileSink(
            descriptor.path,
            name=descriptor.name,
            level=descriptor.level,
            render=descriptor.render,
            max_bytes=options.max_bytes,
            backup_count=options.max_files,
        )
    elif descriptor.kind == "remote":
        if descriptor.remote is None:
            raise SinkResourceError(f"remote sink {descriptor.name!r} has no destination")
        sink = RemoteSink(descriptor.remote, name=descriptor.name, level=descriptor.level)
    else:
        raise ValueError(f"Unknown sink kind: {descriptor.kind}")
    logger.debug("sink created", sink=descriptor.name, kind=descriptor.kind, level=descriptor.level)
    return sink
