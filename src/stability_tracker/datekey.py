"""Clave de fecha (YYYY-MM-DD) del día calendario local."""

from __future__ import annotations

from datetime import date, datetime

from dateutil import tz

_LOCAL_TZ = tz.tzlocal()


def today_key(now: datetime | None = None) -> str:
    """Return the ISO date of the host's local calendar day.

    Args:
        now: Reference instant. Naive values are taken as local time;
            aware values are converted to the local zone first.

    Returns:
        Date key such as ``"2025-12-15"``.
    """
    if now is None:
        now = datetime.now(tz=_LOCAL_TZ)
    elif now.tzinfo is not None:
        now = now.astimezone(_LOCAL_TZ)
    return now.date().isoformat()


def parse_date_key(value: str) -> date:
    """Parse a date key, rejecting anything but ``YYYY-MM-DD``.

    Raises:
        ValueError: If ``value`` is not a canonical date key.
    """
    parsed = date.fromisoformat(value)
    if parsed.isoformat() != value:
        raise ValueError(f"Not a canonical date key: {value!r}")
    return parsed
