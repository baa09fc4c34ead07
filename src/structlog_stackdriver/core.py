"""
Logging setup for applications that ship their logs through the hook.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Literal

import orjson
import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from .types import LogLevel

if TYPE_CHECKING:
    from .config import Settings
    from .hook import StackdriverHook

LogFormat = Literal["console", "json"]


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


# =============================================================================
# Configuration Logic
# =============================================================================


def _resolve_level(level: str) -> int:
    """Map a level name to a stdlib level. ALERT is rendered as CRITICAL."""
    parsed = LogLevel.parse(level)
    return logging.INFO if parsed is None else min(int(parsed), logging.CRITICAL)


def _build_processors(fmt: LogFormat, hook: StackdriverHook | None) -> list[Processor]:
    from .integrations import StackdriverProcessor

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if hook is not None:
        processors.append(StackdriverProcessor(hook))

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer(serializer=orjson_dumps, default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    fmt: LogFormat = "console",
    hook: StackdriverHook | None = None,
    stdlib: bool = False,
) -> None:
    """
    Configure structlog, optionally shipping events through a hook.

    Args:
        level: Minimum level rendered locally, any name LogLevel.parse accepts
        fmt: Local output format (console, json)
        hook: Hook receiving every event that passes its trigger levels
        stdlib: Also attach the hook to the root stdlib logger and set its level
    """
    from .integrations import StackdriverHandler

    min_level = _resolve_level(level)
    structlog.configure(
        processors=_build_processors(fmt, hook),
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    if stdlib and hook is not None:
        root_logger = logging.getLogger()
        root_logger.setLevel(min_level)
        root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, StackdriverHandler)]
        root_logger.addHandler(StackdriverHandler(hook))


def configure_from_settings(settings: Settings | None = None) -> StackdriverHook:
    """
    Build a hook from settings and route structlog and stdlib logging through it.

    Raises:
        ClientInitializationError: If the Cloud Logging client cannot be constructed
    """
    from .config import settings as default_settings
    from .hook import StackdriverHook

    settings = settings or default_settings
    hook = StackdriverHook.from_settings(settings.hook)
    configure_logging(
        level=settings.logging.level.name,
        fmt=settings.logging.format.value,
        hook=hook,
        stdlib=True,
    )
    return hook
