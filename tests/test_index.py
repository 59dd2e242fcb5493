"""Tests for dailywins/index.py."""

from dailywins.index import JournalIndex
from helpers import make_record


def test_build_and_lookup(march_index):
    assert len(march_index) == 5
    assert march_index.lookup("2024-03-03").id == 3
    assert march_index.lookup("2024-03-06") is None
    assert "2024-03-01" in march_index
    assert list(march_index)[0] == "2024-03-01"


def test_first_record_per_day_wins():
    newer = make_record("2024-03-01", id=9, rating=5)
    older = make_record("2024-03-01", id=2, rating=1)
    index = JournalIndex.build([newer, older])
    assert len(index) == 1
    assert index.lookup("2024-03-01").id == 9


def test_empty_index():
    index = JournalIndex.build([])
    assert len(index) == 0
    assert index.lookup("2024-03-01") is None
