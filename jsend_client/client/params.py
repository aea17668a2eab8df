"""Query-string flattening for nested parameter bags.

A bag such as ``{"page": 2, "filter": {"tag": ["a", "b"]}, "since": date(...)}``
becomes ``page=2&tag=a&tag=b&since=2024-01-31``. Nested mappings are merged
into the outer result without prefixing their keys, sequences turn into
repeated keys, and dates drop their time component.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

import httpx

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class ParamKind(str, enum.Enum):
    """Closed set of value shapes the flattener knows how to encode."""

    NONE = "none"
    DATE = "date"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


def classify(value: Any) -> ParamKind:
    if value is None:
        return ParamKind.NONE
    # datetime is a date subclass, so both land here
    if isinstance(value, date):
        return ParamKind.DATE
    if isinstance(value, Mapping):
        return ParamKind.MAPPING
    if isinstance(value, _SEQUENCE_TYPES):
        return ParamKind.SEQUENCE
    return ParamKind.SCALAR


def format_date(value: date) -> str:
    """Render a date or datetime as ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def to_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return format_date(value)
    return str(value)


def flatten_params(params: Optional[Mapping[str, Any]]) -> httpx.QueryParams:
    """Flatten ``params`` into query-string pairs.

    Dates and scalars replace earlier values stored under the same key,
    sequence elements and pairs coming from nested mappings are appended.
    Raises ``ValueError`` if a mapping contains itself.
    """
    if params is None:
        return httpx.QueryParams()
    return _flatten(params, frozenset())


def _flatten(params: Mapping[str, Any], path: frozenset[int]) -> httpx.QueryParams:
    if id(params) in path:
        raise ValueError("query parameters contain a reference cycle")
    path = path | {id(params)}

    result = httpx.QueryParams()
    for key, value in params.items():
        key = str(key)
        kind = classify(value)
        if kind is ParamKind.DATE:
            result = result.set(key, format_date(value))
        elif kind is ParamKind.MAPPING:
            for nested_key, nested_value in _flatten(value, path).multi_items():
                result = result.add(nested_key, nested_value)
        elif kind is ParamKind.SEQUENCE:
            for item in value:
                if item is None:
                    continue
                result = result.add(key, to_query_value(item))
        elif kind is ParamKind.SCALAR:
            result = result.set(key, to_query_value(value))
        # ParamKind.NONE contributes nothing
    return result


__all__ = ["ParamKind", "classify", "flatten_params", "format_date", "to_query_value"]
