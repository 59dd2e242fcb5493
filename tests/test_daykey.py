"""Tests for dailywins/daykey.py — day-key derivation and calendar arithmetic."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dailywins.daykey import (
    day_range,
    day_start,
    days_in_month,
    derive_day_key,
    make_day_key,
    parse_day_key,
    shift_day_key,
    weekday_index,
    year_range,
)
from dailywins.errors import ValidationFailure

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")

dates = st.dates(min_value=date(1900, 1, 1), max_value=date(2200, 12, 31))


def test_derive_from_date_and_naive_datetime():
    assert derive_day_key(date(2024, 3, 5)) == "2024-03-05"
    assert derive_day_key(datetime(2024, 3, 5, 23, 59, 59)) == "2024-03-05"


def test_derive_converts_aware_instant_to_local_calendar():
    instant = datetime(2024, 3, 5, 23, 30, tzinfo=timezone.utc)
    assert derive_day_key(instant, TOKYO) == "2024-03-06"
    assert derive_day_key(instant, NEW_YORK) == "2024-03-05"


def test_derive_from_iso_strings():
    assert derive_day_key("2024-03-05") == "2024-03-05"
    assert derive_day_key("2024-03-05T04:00:00.000Z", NEW_YORK) == "2024-03-04"
    assert derive_day_key("2024-03-05T05:00:00+00:00", NEW_YORK) == "2024-03-05"


@given(day=dates, a=st.times(), b=st.times())
@settings(max_examples=100)
def test_same_local_day_same_key(day: date, a: time, b: time):
    first = datetime.combine(day, a, tzinfo=NEW_YORK)
    second = datetime.combine(day, b, tzinfo=NEW_YORK)
    assert derive_day_key(first.astimezone(timezone.utc), NEW_YORK) == derive_day_key(
        second.astimezone(timezone.utc), NEW_YORK
    )


def test_shift_crosses_month_and_year_boundaries():
    assert shift_day_key("2024-02-28", 1) == "2024-02-29"
    assert shift_day_key("2024-02-29", 1) == "2024-03-01"
    assert shift_day_key("2023-02-28", 1) == "2023-03-01"
    assert shift_day_key("2024-12-31", 1) == "2025-01-01"
    assert shift_day_key("2025-01-01", -1) == "2024-12-31"


def test_shift_across_dst_transition():
    # 2024-03-10 is 23 hours long in New York; the key still advances one day.
    assert shift_day_key("2024-03-09", 1) == "2024-03-10"
    assert shift_day_key("2024-03-10", 1) == "2024-03-11"
    assert shift_day_key("2024-11-03", 1) == "2024-11-04"


@given(day=dates, offset=st.integers(min_value=-5000, max_value=5000))
@settings(max_examples=200)
def test_shift_round_trip(day: date, offset: int):
    key = day.isoformat()
    assert shift_day_key(shift_day_key(key, offset), -offset) == key


@given(a=dates, b=dates)
def test_lexicographic_order_matches_calendar(a: date, b: date):
    assert (a.isoformat() < b.isoformat()) == (a < b)


def test_make_day_key_uses_zero_based_month():
    assert make_day_key(2024, 0, 1) == "2024-01-01"
    assert make_day_key(2024, 1, 29) == "2024-02-29"
    with pytest.raises(ValueError):
        make_day_key(2023, 1, 29)


def test_parse_day_key_rejects_malformed_input():
    assert parse_day_key("2024-03-05") == date(2024, 3, 5)
    for bad in ["2024-3-5", "2024-02-30", "yesterday", "", "2024-03-05T00:00"]:
        with pytest.raises(ValidationFailure):
            parse_day_key(bad)


def test_weekday_index_starts_on_sunday():
    assert weekday_index("2023-01-01") == 0  # Sunday
    assert weekday_index("2024-01-01") == 1  # Monday
    assert weekday_index("2022-01-01") == 6  # Saturday


def test_days_in_month():
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2023, 1) == 28
    assert days_in_month(2100, 1) == 28
    assert days_in_month(2024, 11) == 31


def test_day_range_is_half_open_local_day():
    start, end = day_range("2024-03-10", NEW_YORK)
    assert start == datetime(2024, 3, 10, tzinfo=NEW_YORK)
    assert end == datetime(2024, 3, 11, tzinfo=NEW_YORK)
    assert end.astimezone(timezone.utc) - start.astimezone(timezone.utc) == timedelta(hours=23)


def test_day_start_defaults_to_utc():
    assert day_start("2024-03-05").utcoffset() == timedelta(0)


def test_year_range():
    start, end = year_range(2024, TOKYO)
    assert start.isoformat() == "2024-01-01T00:00:00+09:00"
    assert end.isoformat() == "2025-01-01T00:00:00+09:00"
