"""
Date normalization for values crossing the API boundary.

The remote service stores due dates as date-only values encoded as a UTC
midnight instant, and requires a completion instant on completed items.
"""

from __future__ import annotations

import datetime as dt
import re

_DATE_TIME_SEPARATOR = re.compile(r"[Tt ]")


def _format_instant(value: dt.datetime) -> str:
    value = value.astimezone(dt.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def normalize_due_date(value: str | None) -> str | None:
    """
    Normalize a due date to midnight UTC of its calendar day.

    Any time-of-day or offset is discarded. Malformed input yields None.

    >>> normalize_due_date("2024-03-05")
    '2024-03-05T00:00:00.000Z'
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    try:
        day = dt.date.fromisoformat(_DATE_TIME_SEPARATOR.split(value, maxsplit=1)[0])
    except ValueError:
        return None
    return f"{day.isoformat()}T00:00:00.000Z"


def parse_instant(value: str) -> dt.datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = dt.datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def normalize_completed(value: str | None, now: dt.datetime | None = None) -> str:
    """
    Normalize a completion timestamp, substituting the current time when the
    value is absent or unparseable.
    """
    if value and isinstance(value, str):
        try:
            return _format_instant(parse_instant(value))
        except ValueError:
            pass
    return _format_instant(now or dt.datetime.now(dt.timezone.utc))
