"""structlog setup for gitty.

Log events go to stderr so they never mix with command output on stdout,
and every event passes through ``secret_sanitizer`` before rendering:
config files carry provider API keys, and a key must not end up in a
terminal scrollback or a CI log because a config was dumped at debug level.
"""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any

import structlog

from gitty.utils.security import SecretRedactor, mask_api_key

# Event keys whose values are always API keys, whatever they look like
API_KEY_FIELDS = frozenset({"api_key", "apiKey"})


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@functools.cache
def _redactor() -> SecretRedactor:
    return SecretRedactor(placeholder="[REDACTED]")


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets found anywhere inside ``value``.

    Strings are scanned with the shared SecretRedactor; dicts, lists and
    tuples are walked recursively. A dict entry named like an API key field
    is masked regardless of its content.
    """
    if isinstance(value, str):
        return _redactor().redact(value)
    if isinstance(value, dict):
        return {k: _sanitize_field(k, v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(v) for v in value)
    return value


def _sanitize_field(key: Any, value: Any) -> Any:
    if key in API_KEY_FIELDS and isinstance(value, str):
        return mask_api_key(value)
    return sanitize_log_value(value)


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Processor that sanitizes every field of an event."""
    for key, value in list(event_dict.items()):
        event_dict[key] = _sanitize_field(key, value)
    return event_dict


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Tag events with the service name and package version."""
    event_dict.setdefault("service", "gitty")
    try:
        from gitty._version import __version__
    except (ImportError, RuntimeError):
        return event_dict
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(log_format: LogFormat) -> Any:
    if log_format is LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(), exception_formatter=structlog.dev.plain_traceback
    )


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    log_format: LogFormat | str = LogFormat.CONSOLE,
) -> None:
    """Configure structlog and the stdlib root logger.

    The CLI defaults to WARNING so normal runs only show problems; ``--debug``
    switches to DEBUG, which traces every parsing stage.

    Args:
        level: Log level name, case-insensitive.
        log_format: ``json`` for machine-readable lines, ``console`` otherwise.

    Raises:
        ValueError: If the level or format is unknown.

    Example:
        configure_logging(level="debug", log_format="json")
    """
    level = LogLevel(level.upper())
    log_format = LogFormat(log_format.lower())
    numeric_level = logging.getLevelName(level.value)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            add_context_processor,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            secret_sanitizer,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    logging.basicConfig(format="%(message)s", level=numeric_level, handlers=[handler], force=True)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every event logged from the current context.

    Example:
        bind_context(command="check-config")
        log.info("config_loaded")  # includes command
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
