"""
Logger facade and registry.

Call path for every leveled method:

    normalize -> is_suppressed -> engine.<level>(text) -> every admitting sink
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, get_args

from .config import (
    EngineOptions,
    Environment,
    LogbridgeConfig,
    LogbridgeSettings,
    RemoteSinkConfig,
    load_config,
    load_remote,
)
from .diagnostics import get_logger
from .engine import create_engine
from .errors import ConfigurationError
from .formatters import RESERVED_KEYS
from .levels import LEVELS, canonical_level
from .normalize import is_suppressed, normalize
from .sinks import BaseSink, SinkDescriptor, SinkFactory, create_sink
from .transports import build_transports, merge_options

logger = get_logger()

DEFAULT_LOGGER = "default"

Emitter = Callable[..., Any]


# =============================================================================
# Logger Instance
# =============================================================================


class LoggerInstance:
    """A named, immutable leveled logger. Created by `wrap`."""

    __slots__ = ("_name", "_emitters", "_sinks", "_options")

    def __init__(
        self,
        name: str,
        emitters: Mapping[str, Emitter],
        sinks: Sequence[BaseSink] = (),
        options: EngineOptions | None = None,
    ):
        self._name = name
        self._emitters = dict(emitters)
        self._sinks = tuple(sinks)
        self._options = options or EngineOptions()

    @property
    def name(self) -> str:
        return self._name

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    @property
    def options(self) -> EngineOptions:
        return self._options

    def log(self, level: str, arg: Any = None, **fields: Any) -> bool:
        """Normalize, filter, and hand one record to the engine.

        Returns True when the record was forwarded, False when it was
        suppressed or dropped. Never raises.
        """
        try:
            canonical = canonical_level(level)
            if canonical is None:
                return False
            message = normalize(arg)
            if is_suppressed(message.text):
                return False
            # Caller fields that collide with engine keys are kept under `<key>_`.
            fields = {(f"{k}_" if k in RESERVED_KEYS else k): v for k, v in fields.items()}
            self._emitters[canonical](message.text, **fields)
            return True
        except Exception:
            return False

    def silly(self, arg: Any = None, **fields: Any) -> bool:
        return self.log("silly", arg, **fields)

    def debug(self, arg: Any = None, **fields: Any) -> bool:
        return self.log("debug", arg, **fields)

    def info(self, arg: Any = None, **fields: Any) -> bool:
        return self.log("info", arg, **fields)

    def warn(self, arg: Any = None, **fields: Any) -> bool:
        return self.log("warn", arg, **fields)

    warning = warn

    def error(self, arg: Any = None, **fields: Any) -> bool:
        return self.log("error", arg, **fields)

    def handle_error(self, err: Any) -> bool:
        """Route an error value through the error level."""
        return self.error(err)

    def __repr__(self) -> str:
        return f"LoggerInstance(name={self._name!r}, sinks={[s.name for s in self._sinks]!r})"


def wrap(
    engine: Any,
    name: str,
    sinks: Sequence[BaseSink] = (),
    options: EngineOptions | None = None,
) -> LoggerInstance:
    """Build a LoggerInstance around an engine's level methods without modifying the engine."""
    emitters = {level: getattr(engine, level) for level in LEVELS}
    return LoggerInstance(name, emitters, sinks, options)


# =============================================================================
# Registry
# =============================================================================


class LoggerRegistry:
    """Name -> LoggerInstance, in registration order."""

    def __init__(self, sink_factory: SinkFactory = create_sink):
        self._sink_factory = sink_factory
        self._instances: dict[str, LoggerInstance] = {}

    def register(self, name: str, sinks: Sequence[SinkDescriptor], options: EngineOptions) -> LoggerInstance:
        """Build sinks and engine for `name`; it becomes visible only once complete."""
        if name in self._instances:
            raise ConfigurationError("logger already registered", section="loggers", key=name)

        built: list[BaseSink] = []
        try:
            for descriptor in sinks:
                built.append(self._sink_factory(descriptor, options))
        except Exception:
            for sink in built:
                sink.close()
            raise

        instance = wrap(create_engine(name, built, options), name, built, options)
        self._instances[name] = instance
        logger.debug("logger registered", logger_name=name, sinks=[s.name for s in built])
        return instance

    def get(self, name: str) -> LoggerInstance | None:
        return self._instances.get(name)

    def names(self) -> list[str]:
        return list(self._instances)

    def close(self) -> None:
        for instance in self._instances.values():
            for sink in instance.sinks:
                sink.close()

    def __contains__(self, name: object) -> bool:
        return name in self._instances

    def __iter__(self) -> Iterator[LoggerInstance]:
        return iter(self._instances.values())

    def __len__(self) -> int:
        return len(self._instances)


# =============================================================================
# Facade
# =============================================================================


class Logger:
    """
    Logging facade over one or more named logger instances.

    Usage:
        logger = Logger(config, environment="production")
        logger.log.error("boom")
        logger.get("sql").info({"query": "SELECT 1"})

    Args:
        config: `LogbridgeConfig` or raw mapping (see `logbridge.config`)
        environment: development, test or production; the console and debug
            file sinks are only attached in development
        sink_factory: Builds a sink from a descriptor; override in tests
    """

    def __init__(
        self,
        config: LogbridgeConfig | Mapping[str, Any] | None = None,
        *,
        environment: Environment = "development",
        sink_factory: SinkFactory = create_sink,
    ):
        if environment not in get_args(Environment):
            raise ConfigurationError(
                f"unknown environment {environment!r}, expected one of {', '.join(get_args(Environment))}",
                key="environment",
            )
        self.config = load_config(config)
        self.environment = environment
        self.log_dir = Path(self.config.logging.log_dir)
        self.options = merge_options(self.config.logging.options)
        self.loggers = LoggerRegistry(sink_factory)

        try:
            self._default = self.register(DEFAULT_LOGGER, remote=self.config.remotes.get(DEFAULT_LOGGER))
            for name, remote in self.config.remotes.items():
                if name != DEFAULT_LOGGER:
                    self.register(name, remote=remote)
        except Exception:
            self.loggers.close()
            raise

    @classmethod
    def from_settings(cls, settings: LogbridgeSettings | None = None, **kwargs: Any) -> Logger:
        """Build a facade from LOGBRIDGE_* environment variables."""
        settings = settings or LogbridgeSettings()
        return cls(settings.to_config(), environment=settings.env, **kwargs)

    @property
    def log(self) -> LoggerInstance:
        """The default logger instance."""
        return self._default

    def register(
        self,
        name: str,
        remote: RemoteSinkConfig | Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> LoggerInstance:
        """Add a named instance with its own sinks; file names are prefixed with the name."""
        remote_config = load_remote(f"remotes.{name}", remote) if remote is not None else None
        merged = merge_options(self.config.logging.options, options)
        descriptors = build_transports(
            self.log_dir,
            self.environment,
            remote_config,
            json_mode=merged.json_mode,
            prefix="" if name == DEFAULT_LOGGER else f"{name}-",
        )
        return self.loggers.register(name, descriptors, merged)

    def get(self, name: str) -> LoggerInstance | None:
        return self.loggers.get(name)

    def handle_error(self, err: Any) -> bool:
        """Log an error value through the default instance."""
        return self.log.handle_error(err)

    def close(self) -> None:
        """Release file handles and sockets at process shutdown."""
        self.loggers.close()


def construct(config: LogbridgeConfig | Mapping[str, Any] | None = None, **kwargs: Any) -> Logger:
    return Logger(config, **kwargs)
