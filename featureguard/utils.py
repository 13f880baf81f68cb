"""
Shared helpers for reading loosely typed records.

Principals, resources and payloads arrive as dicts, pydantic models or
plain objects. These helpers read a field the same way from all of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class _Missing:
    """Marker for a field that does not exist on the source."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def read_field(source: Any, name: str, default: Any = MISSING) -> Any:
    """
    Read `name` from a mapping or an object.

    Returns `default` (MISSING unless given) when the field does not exist.
    An explicit None is a value, not an absence.
    """
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def compact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop every entry whose value is MISSING."""
    return {key: value for key, value in values.items() if value is not MISSING}
