"""Day-key codec: canonical local-calendar day identifiers.

A day key is a ``YYYY-MM-DD`` string. Keys sort lexicographically in
chronological order, and all arithmetic happens on calendar dates rather
than instants, so DST transitions never skip or repeat a day.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from dailywins.errors import ValidationFailure

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def derive_day_key(instant: datetime | date | str, tz: tzinfo | None = None) -> str:
    """Local-calendar day key for *instant*; time of day is ignored.

    Aware datetimes are converted to *tz* first (when given). Naive
    datetimes and plain dates are taken as already local. Strings are
    parsed as ISO dates or ISO timestamps.
    """
    if isinstance(instant, str):
        text = instant.strip()
        if _DAY_KEY_RE.match(text):
            return date.fromisoformat(text).isoformat()
        instant = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(instant, datetime):
        if instant.tzinfo is not None and tz is not None:
            instant = instant.astimezone(tz)
        return instant.date().isoformat()
    return instant.isoformat()


def make_day_key(year: int, month_index: int, day: int) -> str:
    """Day key from a 0-based month index (0 = January)."""
    return date(year, month_index + 1, day).isoformat()


def parse_day_key(text: str) -> date:
    """Strictly parse user-supplied input into a date."""
    if not isinstance(text, str) or not _DAY_KEY_RE.match(text.strip()):
        raise ValidationFailure(f"Invalid day key: {text!r} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(text.strip())
    except ValueError as e:
        raise ValidationFailure(f"Invalid day key: {text!r} ({e})") from e


def shift_day_key(key: str, offset_days: int) -> str:
    return (date.fromisoformat(key) + timedelta(days=offset_days)).isoformat()


def weekday_index(key: str) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return (date.fromisoformat(key).weekday() + 1) % 7


def days_in_month(year: int, month_index: int) -> int:
    return calendar.monthrange(year, month_index + 1)[1]


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


# ── Instant ranges for collaborator queries ───────────────────


def day_start(key: str, tz: tzinfo | None = None) -> datetime:
    """Local midnight at the start of *key* (UTC when no tz is given)."""
    return datetime.combine(date.fromisoformat(key), time(0), tzinfo=tz or timezone.utc)


def day_range(key: str, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` instants covering one local day."""
    return day_start(key, tz), day_start(shift_day_key(key, 1), tz)


def year_range(year: int, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` instants covering one local year."""
    return day_start(make_day_key(year, 0, 1), tz), day_start(make_day_key(year + 1, 0, 1), tz)
