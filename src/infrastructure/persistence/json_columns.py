"""Helpers for collections stored as JSON text columns."""

import json

from typing import Any, TypeVar


T = TypeVar("T")


def dump_json(value: Any) -> str:
    """Serialize a collection for storage."""
    return json.dumps(value, ensure_ascii=False)


def load_json(raw: Any, default: T) -> T:
    """Parse a stored JSON column.

    Drivers with native JSON support hand back already-decoded values;
    NULL, malformed text and values of the wrong shape fall back to
    ``default``.
    """
    if raw is None:
        return default
    value = raw
    if isinstance(raw, (str, bytes)):
        try:
            value = json.loads(raw)
        except ValueError:
            return default
    if not isinstance(value, type(default)):
        return default
    return value
