"""
Structured logging for the torrent index.

Manifesto:
    Configuration goes wrong at startup, before anything else can report
    it, so the resolution pass has to say which source it read, how many
    overrides it applied and why it gave up.  Those are structlog events
    with key-value fields (never secret values), rendered as JSON when the
    output is collected and as coloured console lines for a developer.

Pipeline::

    event ─► contextvars ─► level / logger name ─► service ─► timestamp
          ─► JSONRenderer | ConsoleRenderer ─► stdlib logging ─► stream

The stdlib root logger owns the stream and the final level, so
``threshold = "off"`` can silence even CRITICAL events.

Once the settings document is resolved, :func:`configure_logging_from_settings`
re-applies the level from ``logging.threshold``.

Examples:
    >>> from torrent_index.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> get_logger(__name__).info("config_loaded", source="file", path="index.toml")

Tags:
    logging, structlog, observability, json-logging, torrent-index
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from contextvars import Token
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from torrent_index.core.config.settings import Settings, Threshold

DEFAULT_SERVICE = "torrust-index"

#: Level used for ``threshold = "off"``: above CRITICAL, so nothing is emitted.
LEVEL_OFF = logging.CRITICAL + 10

_THRESHOLD_LEVELS: Mapping[str, int] = {
    "off": LEVEL_OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}


class _ServiceName:
    """Processor stamping every event with the service it came from."""

    def __init__(self, service: str) -> None:
        self.service = service

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", self.service)
        return event_dict


_service = _ServiceName(DEFAULT_SERVICE)


def threshold_to_level(threshold: Threshold | str) -> int:
    """Stdlib level for a ``logging.threshold`` value; ``trace`` is DEBUG."""
    name = str(getattr(threshold, "value", threshold)).lower()
    if name not in _THRESHOLD_LEVELS:
        raise ValueError(f"Unknown logging threshold: {threshold!r}")
    return _THRESHOLD_LEVELS[name]


def _processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _service,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if add_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso"))
    if json_format:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=True))
    return chain


def configure_logging(
    level: str | int = "INFO",
    json_format: bool | None = None,
    service: str = DEFAULT_SERVICE,
    add_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger for the process.

    Args:
        level: level name (``"WARNING"``) or number
        json_format: JSON lines if true, console if false, auto-detect (JSON unless a tty) if None
        service: value of the ``service`` field on every event
        add_timestamp: add an ISO ``timestamp`` field
        stream: destination, stdout by default
    """
    out = stream or sys.stdout
    numeric_level = level if isinstance(level, int) else logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")
    if json_format is None:
        json_format = not out.isatty()

    _service.service = service

    structlog.configure(
        processors=_processors(json_format, add_timestamp),
        # structlog only knows the standard levels; "off" is enforced by the root logger.
        wrapper_class=structlog.make_filtering_bound_logger(min(numeric_level, logging.CRITICAL)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=out, level=numeric_level, force=True)


def configure_logging_from_settings(
    settings: Settings,
    json_format: bool | None = None,
) -> int:
    """Apply the document's ``logging.threshold``. Returns the numeric level used."""
    level = threshold_to_level(settings.logging.threshold)
    configure_logging(level=level, json_format=json_format, service=_service.service)
    return level


def get_logger(name: str | None = None) -> Any:
    """Structured logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**values: Any) -> None:
    """Attach fields to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**values)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Scoped :func:`bind_context`; outer values are restored on exit.

    Example:
        with LogContext(operation="config_reload"):
            load_settings(info)   # every event carries operation=config_reload
    """

    def __init__(self, **values: Any):
        self._values = values
        self._tokens: Mapping[str, Token[Any]] = {}

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self._values)
        return self

    def __exit__(self, *exc_info: object) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "DEFAULT_SERVICE",
    "LEVEL_OFF",
    "LogContext",
    "bind_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "threshold_to_level",
    "unbind_context",
]
