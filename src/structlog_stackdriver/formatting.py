"""
Default value formatting for residual log fields.

Values are probed against a fixed chain of capabilities and the first match
decides the output:

1. self-serializing values pass through for the JSON encoder to handle
2. exceptions become their message text
3. objects with their own ``__str__`` become that text
4. anything else passes through unchanged
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from pydantic import BaseModel

# Types the payload encoder (orjson) serializes without help.
_JSON_NATIVE = (str, int, float, bool, type(None), dict, list, tuple, datetime, date, time, UUID, Enum)


@runtime_checkable
class SupportsJSON(Protocol):
    """Objects that render themselves into JSON-compatible values."""

    def __json__(self) -> Any: ...


def is_self_serializing(value: Any) -> bool:
    if isinstance(value, _JSON_NATIVE):
        return True
    if isinstance(value, BaseModel):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return isinstance(value, SupportsJSON)


def has_text_representation(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def format_value(value: Any) -> Any:
    """Apply the default formatting policy to a single field value."""
    if is_self_serializing(value):
        return value
    if isinstance(value, BaseException):
        return str(value)
    if has_text_representation(value):
        return str(value)
    return value
