from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.core.dates import day_key, end_of_day, normalize_date, start_of_day


def test_two_digit_years_pivot_at_fifty():
    assert normalize_date("1/5/24") == datetime(2024, 1, 5)
    assert normalize_date("12/31/49") == datetime(2049, 12, 31)
    assert normalize_date("3/15/50") == datetime(1950, 3, 15)
    assert normalize_date("03/15/2023") == datetime(2023, 3, 15)


def test_time_of_day_is_discarded():
    assert normalize_date("1/5/24 10:32:00") == datetime(2024, 1, 5)
    assert normalize_date("2024-02-29 18:00") == datetime(2024, 2, 29)


def test_other_formats_fall_back_to_pandas():
    assert normalize_date("2023-11-05") == datetime(2023, 11, 5)


def test_unparseable_values_become_none():
    assert normalize_date(None) is None
    assert normalize_date("") is None
    assert normalize_date("   ") is None
    assert normalize_date("not a date") is None
    assert normalize_date("13/45/24") is None


def test_invalid_month_day_year_is_not_reread_as_day_first():
    assert normalize_date("13/5/2024") is None
    assert normalize_date("2/30/24") is None
    assert normalize_date("5/13/2024") == datetime(2024, 5, 13)


def test_date_objects_and_aware_datetimes():
    assert normalize_date(date(2024, 6, 1)) == datetime(2024, 6, 1)
    aware = datetime(2024, 6, 1, 2, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    assert normalize_date(aware) == datetime(2024, 5, 31, 20, 30)


def test_day_bounds_and_keys():
    assert start_of_day(date(2024, 1, 5)) == datetime(2024, 1, 5)
    assert end_of_day(date(2024, 1, 5)) == datetime(2024, 1, 5, 23, 59, 59, 999000)
    assert day_key(datetime(2024, 1, 5, 13, 0)) == "2024-01-05"
    assert day_key(date(2024, 1, 5)) == "2024-01-05"
