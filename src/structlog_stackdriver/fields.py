"""
Structured field extraction for a single log entry.

A FieldExtractor pulls the well-known fields (log name, HTTP request, HTTP
response) out of an entry's field mapping and remembers which keys it has
claimed, so the hook can leave them out of the generic ``jsonPayload``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Set, Tuple

import httpx

from .types import LogEntry, LogLevel, Severity

FIELD_MESSAGE = "message"
FIELD_LOG_NAME = "log_name"
FIELD_HTTP_REQUEST = "http_request"
FIELD_HTTP_RESPONSE = "http_response"

_SEVERITIES: Dict[LogLevel, Severity] = {
    LogLevel.DEBUG: Severity.DEBUG,
    LogLevel.INFO: Severity.INFO,
    LogLevel.WARNING: Severity.WARNING,
    LogLevel.ERROR: Severity.ERROR,
    LogLevel.CRITICAL: Severity.CRITICAL,
    LogLevel.ALERT: Severity.ALERT,
}


class FieldExtractor:
    """Per-entry view over a field mapping with claim tracking.

    Claims only ever go from unclaimed to claimed. Repeated getter calls
    return the same value and leave the claim set unchanged.
    """

    def __init__(self, default_log_name: str, fields: Mapping[str, Any], level: Any) -> None:
        self._default_log_name = default_log_name
        self._fields = fields
        self._level = level
        self._claimed: Set[str] = set()

    @classmethod
    def from_entry(cls, default_log_name: str, entry: LogEntry) -> "FieldExtractor":
        """Build an extractor that is guaranteed to hold a ``message`` field.

        The entry's mapping is used as-is when it already has one; otherwise a
        shallow copy receives ``entry.message`` and the original is left alone.
        """
        if FIELD_MESSAGE in entry.fields:
            return cls(default_log_name, entry.fields, entry.level)

        fields = dict(entry.fields)
        fields[FIELD_MESSAGE] = entry.message
        return cls(default_log_name, fields, entry.level)

    def __len__(self) -> int:
        return len(self._fields)

    def is_claimed(self, key: str) -> bool:
        return key in self._claimed

    def items(self) -> Iterator[Tuple[str, Any]]:
        """Iterate the fields that have not been claimed."""
        for key, value in self._fields.items():
            if key not in self._claimed:
                yield key, value

    def get_request(self) -> Optional[httpx.Request]:
        request = self._fields.get(FIELD_HTTP_REQUEST)
        if isinstance(request, httpx.Request):
            self._claimed.add(FIELD_HTTP_REQUEST)
            return request
        return None

    def get_response(self) -> Optional[httpx.Response]:
        response = self._fields.get(FIELD_HTTP_RESPONSE)
        if isinstance(response, httpx.Response):
            self._claimed.add(FIELD_HTTP_RESPONSE)
            return response
        return None

    def get_log_name(self) -> str:
        """Return the per-entry log name, or the default.

        A string ``log_name`` is moved into the payload's log name slot, so it
        is claimed. Any other value type is ignored and stays in the data.
        """
        name = self._fields.get(FIELD_LOG_NAME)
        if isinstance(name, str):
            self._claimed.add(FIELD_LOG_NAME)
            return name
        return self._default_log_name

    def get_severity(self) -> Severity:
        # Only the local scale maps; names and unknown numbers fall to DEFAULT.
        level = LogLevel.parse(self._level) if isinstance(self._level, int) else None
        return _SEVERITIES.get(level, Severity.DEFAULT)
