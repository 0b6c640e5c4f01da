"""Timestamp coercion for engine-supplied wall-clock values."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce an engine timestamp into an aware ``datetime``.

    Numbers are epoch milliseconds, strings are ISO-8601 and datetimes pass
    through. Naive datetimes are assumed to be UTC. ``None`` and empty
    strings yield ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        msg = f"Unsupported timestamp: {value!r}"
        raise TypeError(msg)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    msg = f"Unsupported timestamp: {value!r}"
    raise TypeError(msg)


def millis_between(start: datetime | None, end: datetime | None) -> int:
    """Return ``end - start`` in whole milliseconds, or 0 if either is missing."""
    if start is None or end is None:
        return 0
    return round((end - start).total_seconds() * 1000)
