from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx
from google.cloud.logging_v2.resource import Resource


FieldFilter = Callable[[Any], Any]


class LogLevel(IntEnum):
    """Local severity scale.

    Numeric values line up with the stdlib ``logging`` levels; ``ALERT`` sits
    above ``CRITICAL`` for process-terminating (fatal) events.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    ALERT = 60

    @classmethod
    def parse(cls, value: Any) -> Optional["LogLevel"]:
        """Resolve a level from a LogLevel, a numeric level or a level name.

        Returns None for anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        if isinstance(value, str):
            return _LEVEL_NAMES.get(value.strip().lower())
        return None


_LEVEL_NAMES: Dict[str, LogLevel] = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "exception": LogLevel.ERROR,
    "critical": LogLevel.CRITICAL,
    "panic": LogLevel.CRITICAL,
    "alert": LogLevel.ALERT,
    "fatal": LogLevel.ALERT,
}


class Severity(str, Enum):
    """Cloud Logging severity scale."""

    DEFAULT = "DEFAULT"
    DEBUG = "DEBUG"
    INFO = "INFO"
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    ALERT = "ALERT"
    EMERGENCY = "EMERGENCY"


# Every entry is written against the project-wide "global" resource.
GLOBAL_RESOURCE = Resource(type="global", labels={})


@dataclass(frozen=True)
class LogEntry:
    """A log event handed over by the surrounding logging framework.

    ``level`` is normally a LogLevel; any other value is carried through and
    maps to ``Severity.DEFAULT``.
    """

    level: Union[LogLevel, int, str, None]
    message: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WriteData:
    """Payload submitted to a LoggingClient."""

    log_name: str
    severity: Severity
    data: Dict[str, Any]
    labels: Optional[Mapping[str, str]] = None
    request: Optional[httpx.Request] = None
    response: Optional[httpx.Response] = None
    resource: Resource = field(default_factory=lambda: GLOBAL_RESOURCE)
