"""Tests for dailywins/snapshot.py — dirty detection and save payloads."""

from dailywins.snapshot import (
    WinEntryState,
    build_record,
    build_wins_state,
    can_save,
    is_dirty,
    snapshot,
)
from dailywins.models import WinEntry
from helpers import EXERCISE, ITEMS, READ, make_record


def test_identical_inputs_are_clean():
    wins = [WinEntryState(1, True, "ran 5k"), WinEntryState(2)]
    assert not is_dirty(snapshot(3, "Good day", wins), snapshot(3, "Good day", wins))


def test_surrounding_whitespace_is_ignored():
    a = snapshot(3, "  Good day\n", [WinEntryState(1, True, " ran ")])
    b = snapshot(3, "Good day", [WinEntryState(1, True, "ran")])
    assert not is_dirty(a, b)


def test_any_change_is_dirty():
    base = snapshot(3, "Good day", [WinEntryState(1, True, "")])
    assert is_dirty(snapshot(4, "Good day", [WinEntryState(1, True, "")]), base)
    assert is_dirty(snapshot(3, "Great day", [WinEntryState(1, True, "")]), base)
    assert is_dirty(snapshot(3, "Good day", [WinEntryState(1, False, "")]), base)
    assert is_dirty(snapshot(3, "Good day", [WinEntryState(1, True, "note")]), base)
    assert is_dirty(snapshot(None, "Good day", [WinEntryState(1, True, "")]), base)


def test_comparison_is_order_sensitive():
    a = snapshot(None, "", [WinEntryState(1), WinEntryState(2)])
    b = snapshot(None, "", [WinEntryState(2), WinEntryState(1)])
    assert is_dirty(a, b)


def test_build_wins_state_follows_item_order():
    record = make_record("2024-03-01", id=1)
    record.wins = [WinEntry(READ.id, True, "ch. 4"), WinEntry(99, True)]
    states = build_wins_state(ITEMS, record)
    assert states == [
        WinEntryState(EXERCISE.id, False, ""),
        WinEntryState(READ.id, True, "ch. 4"),
    ]
    assert build_wins_state(ITEMS, None) == [WinEntryState(1), WinEntryState(2)]


def test_can_save():
    assert not can_save(None, "   ", [WinEntryState(1)])
    assert can_save(2, "", [])
    assert can_save(None, "something", [])
    assert can_save(None, "", [WinEntryState(1, True)])


def test_build_record_sends_only_completed_wins():
    record = build_record(
        "2024-03-05",
        7,
        4,
        "  Long day  ",
        [WinEntryState(1, True, "  gym "), WinEntryState(2, False, "meh"), WinEntryState(3, True, "   ")],
    )
    assert record.id == 7
    assert record.day_key == "2024-03-05"
    assert record.text == "Long day"
    assert record.wins == [WinEntry(1, True, "gym"), WinEntry(3, True, None)]


def test_build_record_empty_text_is_none():
    assert build_record("2024-03-05", None, 1, "  ", []).text is None
