"""Tests for dailywins/grid.py — month, week and year calendar views."""

from dailywins.grid import build_month_grid, build_week_grid, build_year_grid, classify_day
from dailywins.index import JournalIndex
from dailywins.models import DayState, DayStatus
from helpers import make_record


def test_classify_day():
    index = JournalIndex.build([
        make_record("2024-03-01", id=1, rating=4),
        make_record("2024-03-02", id=2, text="no rating today"),
    ])
    assert classify_day(index, "2024-03-01") == DayState("2024-03-01", DayStatus.RATED, 4)
    assert classify_day(index, "2024-03-02") == DayState("2024-03-02", DayStatus.UNRATED)
    assert classify_day(index, "2024-03-03") == DayState("2024-03-03", DayStatus.MISSING)


def test_february_leap_year_has_29_days(march_index):
    grid = build_month_grid(2024, 1, march_index)
    assert len(grid) == 29
    assert grid[0].key == "2024-02-01"
    assert grid[-1].key == "2024-02-29"
    assert all(d.status is DayStatus.MISSING for d in grid)


def test_february_common_year_has_28_days():
    assert len(build_month_grid(2023, 1, JournalIndex.build([]))) == 28


def test_month_grid_is_ascending_and_classified(march_index):
    grid = build_month_grid(2024, 2, march_index)
    assert len(grid) == 31
    assert [d.key for d in grid] == sorted(d.key for d in grid)
    assert [d.rating for d in grid[:5]] == [3, 3, 3, 3, 3]
    assert grid[5].status is DayStatus.MISSING


def test_week_grid_pads_to_january_first_weekday(march_index):
    cells = build_week_grid(2024, march_index)
    # 2024-01-01 is a Monday: one Sunday placeholder.
    assert cells[0] is None
    assert cells[1].key == "2024-01-01"
    assert len(cells) == 1 + 366
    assert cells[-1].key == "2024-12-31"

    cells_2023 = build_week_grid(2023, JournalIndex.build([]))
    # 2023-01-01 is a Sunday: no padding.
    assert cells_2023[0].key == "2023-01-01"
    assert len(cells_2023) == 365


def test_week_grid_matches_month_grids(march_index):
    cells = [c for c in build_week_grid(2024, march_index) if c is not None]
    months = [d for _label, days in build_year_grid(2024, march_index) for d in days]
    assert cells == months


def test_year_grid_labels():
    rows = build_year_grid(2024, JournalIndex.build([]))
    assert [label for label, _days in rows][:3] == ["Jan", "Feb", "Mar"]
    assert len(rows) == 12
    assert sum(len(days) for _label, days in rows) == 366


def test_day_state_display():
    assert DayState("2024-03-05", DayStatus.RATED, 3).label == "Mar 5: 3/5"
    assert DayState("2024-03-05", DayStatus.RATED, 3).state_class == "rating-3"
    assert DayState("2024-03-05", DayStatus.UNRATED).label == "Mar 5: journal, no rating"
    assert DayState("2024-03-05", DayStatus.UNRATED).state_class == "is-unrated"
    assert DayState("2024-12-25", DayStatus.MISSING).label == "Dec 25: no entry"
    assert DayState("2024-12-25", DayStatus.MISSING).state_class == "is-missing"
