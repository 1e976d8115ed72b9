"""Safe field accessors for loosely-typed platform payloads.

Adapters receive plain ``dict`` objects decoded from JSON whose shape varies
by platform and sometimes by API version. Each accessor looks up one named
field and returns a typed value, or ``None`` when the field is missing or of
the wrong type, so a malformed record never crashes a conversion.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


def get_str(data: Any, key: str) -> str | None:
    """Return ``data[key]`` as a string, or None.

    Integers are stringified because several platforms send numeric ids.
    """
    value = _lookup(data, key)
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def get_int(data: Any, key: str) -> int | None:
    value = _lookup(data, key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def get_float(data: Any, key: str) -> float | None:
    value = _lookup(data, key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def get_bool(data: Any, key: str) -> bool | None:
    value = _lookup(data, key)
    return value if isinstance(value, bool) else None


def get_list(data: Any, key: str) -> list[Any]:
    """Return ``data[key]`` if it is a list, else an empty list."""
    value = _lookup(data, key)
    return value if isinstance(value, list) else []


def get_datetime(data: Any, key: str) -> datetime | None:
    """Parse ISO-8601 strings and unix epoch seconds into a datetime.

    Epoch values are interpreted as UTC. Unparsable values yield None.
    """
    value = _lookup(data, key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError):
            logger.debug("Out-of-range epoch for %r: %r", key, value)
            return None
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparsable timestamp for %r: %r", key, value)
            return None
    return None


def first_str(data: Any, *keys: str) -> str | None:
    """Return the first non-empty string among *keys*.

    Useful where platforms name the same field differently
    (``content`` / ``text`` / ``body``).
    """
    for key in keys:
        value = get_str(data, key)
        if value:
            return value
    return None


def _lookup(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        return None
    return data.get(key)
