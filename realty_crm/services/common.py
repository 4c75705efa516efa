"""Helpers shared by the service modules."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

LIKE_ESCAPE = "\\"


def like_pattern(term: str) -> str:
    """Build a ``%term%`` pattern with LIKE wildcards in *term* escaped.

    Use with ``column.ilike(pattern, escape=LIKE_ESCAPE)``.
    """
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_datetime(value: object) -> datetime | None:
    """Coerce common date/time representations into an aware ``datetime``.

    Accepts datetimes, dates (midnight UTC), ISO strings with a trailing
    ``Z`` and bare ``YYYY-MM-DD`` strings from HTML date inputs.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return as_utc(value)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return as_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        except ValueError:
            pass
        try:
            return datetime.combine(date.fromisoformat(raw[:10]), time.min, tzinfo=timezone.utc)
        except ValueError:
            return None

    return None


def coerce_date(value: object) -> date | None:
    """Coerce into a plain ``date``; asyncpg refuses strings for Date columns."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).date()
    if isinstance(value, date):
        return value
    parsed = coerce_datetime(value)
    return parsed.date() if parsed else None
