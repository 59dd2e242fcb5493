"""Streak counting: bounded backward walks over a JournalIndex.

A streak is the number of consecutive qualifying days ending at the
reference day. The walk examines at most ``max_lookback`` days, so a
longer run reports the cap. Results depend only on the index contents,
the reference key and the window; never on the wall clock.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from dailywins.daykey import shift_day_key
from dailywins.index import JournalIndex
from dailywins.models import JournalRecord

DEFAULT_MAX_LOOKBACK = 60


def _walk(
    index: JournalIndex,
    reference_key: str,
    max_lookback: int,
    qualifies: Callable[[JournalRecord], bool],
) -> int:
    count = 0
    key = reference_key
    for _ in range(max(0, max_lookback)):
        record = index.lookup(key)
        if record is None or not qualifies(record):
            break
        count += 1
        key = shift_day_key(key, -1)
    return count


def compute_overall_streak(
    index: JournalIndex,
    reference_key: str,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
) -> int:
    """Consecutive days with any journal record, ending at *reference_key*."""
    return _walk(index, reference_key, max_lookback, lambda _record: True)


def compute_item_streak(
    index: JournalIndex,
    item_id: int,
    reference_key: str,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
) -> int:
    """Consecutive days on which *item_id* was marked completed."""
    return _walk(index, reference_key, max_lookback, lambda record: record.has_completed(item_id))


def compute_item_streaks(
    index: JournalIndex,
    item_ids: Iterable[int],
    reference_key: str,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
) -> dict[int, int]:
    return {
        item_id: compute_item_streak(index, item_id, reference_key, max_lookback)
        for item_id in item_ids
    }
