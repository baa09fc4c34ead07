"""
Adapters feeding structlog events and stdlib log records into the hook.

Both enforce the hook's trigger levels before firing and skip events logged
by this package itself, so a failing async write cannot feed back into the
hook.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from structlog.typing import EventDict, WrappedLogger

from .types import LogEntry, LogLevel

if TYPE_CHECKING:
    from .hook import StackdriverHook

_OWN_LOGGER_PREFIX = "structlog_stackdriver"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _is_own_logger(name: Any) -> bool:
    return isinstance(name, str) and name.startswith(_OWN_LOGGER_PREFIX)


class StackdriverProcessor:
    """
    Structlog processor that fires the hook for every event at a trigger level.

    The event dict is returned unchanged, so the processor can sit anywhere
    before the renderer. Errors raised by a synchronous hook propagate to the
    logging call.
    """

    def __init__(self, hook: StackdriverHook):
        self._hook = hook

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if _is_own_logger(event_dict.get("logger", event_dict.get("_name"))):
            return event_dict

        level = LogLevel.parse(event_dict.get("level", method_name))
        if level is None or level not in self._hook.levels:
            return event_dict

        fields = {k: v for k, v in event_dict.items() if k not in ("event", "level", "_name")}
        message = event_dict.get("event")
        self._hook.fire(LogEntry(level=level, message="" if message is None else str(message), fields=fields))
        return event_dict


class StackdriverHandler(logging.Handler):
    """
    Stdlib logging handler that fires the hook.

    ``extra=`` attributes become entry fields, the logger name goes to
    ``logger`` and an attached exception goes to ``error``.
    """

    def __init__(self, hook: StackdriverHook, level: int = logging.NOTSET):
        super().__init__(level)
        self._hook = hook

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if _is_own_logger(record.name):
                return

            level = LogLevel.parse(record.levelno)
            if level is None or level not in self._hook.levels:
                return

            self._hook.fire(
                LogEntry(level=level, message=record.getMessage(), fields=self._record_fields(record))
            )
        except Exception:
            self.handleError(record)

    @staticmethod
    def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
        fields: Dict[str, Any] = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        fields.setdefault("logger", record.name)
        error: Optional[BaseException] = record.exc_info[1] if record.exc_info else None
        if error is not None:
            fields.setdefault("error", error)
        return fields
