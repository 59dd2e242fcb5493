"""Calendar-shaped views of per-day classification for the progress screen."""

from __future__ import annotations

from dailywins.daykey import days_in_month, days_in_year, make_day_key, shift_day_key, weekday_index
from dailywins.index import JournalIndex
from dailywins.models import MONTH_LABELS, DayState, DayStatus


def classify_day(index: JournalIndex, key: str) -> DayState:
    """Missing without a record, Unrated with a record but no rating, else Rated."""
    record = index.lookup(key)
    if record is None:
        return DayState(key, DayStatus.MISSING)
    if not record.rating:
        return DayState(key, DayStatus.UNRATED)
    return DayState(key, DayStatus.RATED, record.rating)


def build_month_grid(year: int, month_index: int, index: JournalIndex) -> list[DayState]:
    """One DayState per day of the month (0-based month index), ascending."""
    return [
        classify_day(index, make_day_key(year, month_index, day))
        for day in range(1, days_in_month(year, month_index) + 1)
    ]


def build_year_grid(year: int, index: JournalIndex) -> list[tuple[str, list[DayState]]]:
    return [
        (label, build_month_grid(year, month_index, index))
        for month_index, label in enumerate(MONTH_LABELS)
    ]


def build_week_grid(year: int, index: JournalIndex) -> list[DayState | None]:
    """Every day of the year, left-padded so Jan 1 sits under its weekday column.

    Columns run Sunday (0) to Saturday (6); padding cells are None.
    """
    first = make_day_key(year, 0, 1)
    cells: list[DayState | None] = [None] * weekday_index(first)
    key = first
    for _ in range(days_in_year(year)):
        cells.append(classify_day(index, key))
        key = shift_day_key(key, 1)
    return cells
