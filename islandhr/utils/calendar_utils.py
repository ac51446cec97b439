import json
import logging
from datetime import date, datetime, timedelta
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pytz import timezone

from islandhr.config import settings
from islandhr.models.holidays import Holiday

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_FILE = Path(__file__).resolve().parent.parent / "data" / "holidays_2025.json"

WEEKDAY_NAME_TO_INDEX = {
    "MONDAY": 0,
    "TUESDAY": 1,
    "WEDNESDAY": 2,
    "THURSDAY": 3,
    "FRIDAY": 4,
    "SATURDAY": 5,
    "SUNDAY": 6,
}

OFF_DAY_REASON = "off-day"


class HolidayCalendar:
    """
    Fixed set of company holidays, keyed by ISO date.
    """

    def __init__(self, holidays: Iterable[Holiday]):
        self._by_date: Dict[str, Holiday] = {}
        for holiday in holidays:
            self._by_date[holiday.date.isoformat()] = holiday

    def __len__(self):
        return len(self._by_date)

    def __iter__(self):
        return iter(sorted(self._by_date.values(), key=lambda h: h.date))

    def is_holiday(self, day: date) -> dict:
        holiday = self._by_date.get(day.isoformat())
        return {
            "is_holiday": holiday is not None,
            "name": holiday.name if holiday else None,
        }

    def holidays_between(self, start: date, end: date) -> List[Holiday]:
        return [holiday for holiday in self if start <= holiday.date <= end]


def load_holiday_calendar(path: Optional[str] = None) -> HolidayCalendar:
    """
    Build a calendar from a JSON list of {"date": "YYYY-MM-DD", "name": ...} entries.
    Falls back to the bundled 2025 calendar when no path is given.
    """
    source = Path(path) if path else DEFAULT_HOLIDAYS_FILE
    with open(source, encoding="utf-8") as fp:
        entries = json.load(fp)

    calendar = HolidayCalendar(Holiday(**entry) for entry in entries)
    logger.info("Loaded %d holidays from %s", len(calendar), source)
    return calendar


@lru_cache()
def get_holiday_calendar() -> HolidayCalendar:
    return load_holiday_calendar(settings.HOLIDAYS_FILE or None)


def weekday_index(name: str) -> int:
    try:
        return WEEKDAY_NAME_TO_INDEX[name.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown weekday name: {name}")


def get_weekly_off_day() -> int:
    return weekday_index(settings.WEEKLY_OFF_DAY)


def today_in_reference_timezone() -> date:
    return datetime.now(timezone(settings.TIMEZONE)).date()


def _daterange(start: date, end: date):
    curr = start
    while curr <= end:
        yield curr
        # date.max has no successor
        if curr == end:
            break
        curr += timedelta(days=1)


def count_business_days(start: date, end: date, calendar: HolidayCalendar, weekly_off_day: int) -> int:
    """
    Count days in [start, end] that are neither the weekly off-day nor a holiday.
    An inverted range counts as zero days.
    """
    if start > end:
        return 0

    business_days = 0
    for day in _daterange(start, end):
        if day.weekday() == weekly_off_day:
            continue
        if calendar.is_holiday(day)["is_holiday"]:
            continue
        business_days += 1
    return business_days


def excluded_days(start: date, end: date, calendar: HolidayCalendar, weekly_off_day: int) -> List[dict]:
    """List the days count_business_days leaves out, with the reason for each."""
    excluded = []
    if start > end:
        return excluded

    for day in _daterange(start, end):
        if day.weekday() == weekly_off_day:
            excluded.append({"date": day, "reason": OFF_DAY_REASON})
            continue
        lookup = calendar.is_holiday(day)
        if lookup["is_holiday"]:
            excluded.append({"date": day, "reason": lookup["name"]})
    return excluded
