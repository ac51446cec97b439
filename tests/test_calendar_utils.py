import json
from datetime import date, timedelta

import pytest

from islandhr.utils.calendar_utils import (OFF_DAY_REASON, count_business_days, excluded_days,
                                           load_holiday_calendar, weekday_index)
from conftest import FRIDAY

THURSDAY = weekday_index("thursday")


def test_is_holiday_returns_name(holiday_calendar):
    assert holiday_calendar.is_holiday(date(2025, 5, 1)) == {"is_holiday": True, "name": "Labour Day"}


def test_unknown_date_is_not_a_holiday(holiday_calendar):
    assert holiday_calendar.is_holiday(date(2025, 5, 2)) == {"is_holiday": False, "name": None}


def test_holidays_between_is_inclusive_and_ordered(holiday_calendar):
    names = [h.name for h in holiday_calendar.holidays_between(date(2025, 1, 1), date(2025, 5, 1))]
    assert names == ["New Year Day", "Eid-ul Fithr", "Labour Day"]


def test_inverted_range_counts_zero(holiday_calendar):
    assert count_business_days(date(2025, 2, 10), date(2025, 2, 9), holiday_calendar, FRIDAY) == 0


def test_single_working_day_counts_one(holiday_calendar):
    # 2025-02-10 is a Monday
    assert count_business_days(date(2025, 2, 10), date(2025, 2, 10), holiday_calendar, FRIDAY) == 1


def test_single_off_day_or_holiday_counts_zero(holiday_calendar):
    assert count_business_days(date(2025, 1, 3), date(2025, 1, 3), holiday_calendar, FRIDAY) == 0
    assert count_business_days(date(2025, 3, 31), date(2025, 3, 31), holiday_calendar, FRIDAY) == 0


def test_full_week_drops_the_off_day(holiday_calendar):
    # Sunday 2025-01-05 to Saturday 2025-01-11
    assert count_business_days(date(2025, 1, 5), date(2025, 1, 11), holiday_calendar, FRIDAY) == 6


def test_holiday_and_off_day_scenario(holiday_calendar):
    # 01-01 holiday, 01-02 is the off-day, only 01-03 counts
    start, end = date(2025, 1, 1), date(2025, 1, 3)
    assert count_business_days(start, end, holiday_calendar, THURSDAY) == 1
    assert [e["reason"] for e in excluded_days(start, end, holiday_calendar, THURSDAY)] == [
        "New Year Day", OFF_DAY_REASON,
    ]


def test_business_days_never_exceed_calendar_days(holiday_calendar):
    start = date(2025, 1, 1)
    for length in range(0, 60, 7):
        end = start + timedelta(days=length)
        business = count_business_days(start, end, holiday_calendar, FRIDAY)
        excluded = excluded_days(start, end, holiday_calendar, FRIDAY)
        assert business <= length + 1
        assert business + len(excluded) == length + 1


def test_holiday_on_the_off_day_is_excluded_once(holiday_calendar):
    # Independence Day 2025-07-26 falls on a Saturday
    saturday = weekday_index("SATURDAY")
    excluded = excluded_days(date(2025, 7, 26), date(2025, 7, 26), holiday_calendar, saturday)
    assert excluded == [{"date": date(2025, 7, 26), "reason": OFF_DAY_REASON}]


def test_weekday_index_rejects_unknown_names():
    with pytest.raises(ValueError):
        weekday_index("Funday")


def test_load_holiday_calendar_from_file(tmp_path):
    path = tmp_path / "holidays_2026.json"
    path.write_text(json.dumps([
        {"date": "2026-01-01", "name": "New Year Day"},
        {"date": "2026-07-26", "name": "Independence Day"},
    ]))
    calendar = load_holiday_calendar(str(path))
    assert len(calendar) == 2
    assert calendar.is_holiday(date(2026, 7, 26))["name"] == "Independence Day"


def test_bundled_calendar_is_loaded_by_default():
    calendar = load_holiday_calendar()
    assert len(calendar) == 7
    assert calendar.is_holiday(date(2025, 6, 6))["is_holiday"] is True


def test_range_ending_on_last_representable_date(holiday_calendar):
    expected = 0 if date.max.weekday() == FRIDAY else 1
    assert count_business_days(date.max, date.max, holiday_calendar, FRIDAY) == expected

    start = date.max - timedelta(days=6)
    assert count_business_days(start, date.max, holiday_calendar, FRIDAY) == 6
    assert excluded_days(start, date.max, holiday_calendar, FRIDAY) == [
        {"date": day, "reason": OFF_DAY_REASON}
        for day in (start + timedelta(days=n) for n in range(7))
        if day.weekday() == FRIDAY
    ]
