from datetime import date
from pydantic import BaseModel
from typing import Optional, List


class HolidayLookupResult(BaseModel):
    date: date
    is_holiday: bool
    name: Optional[str] = None


class ExcludedDay(BaseModel):
    date: date
    reason: str


class BusinessDaysResult(BaseModel):
    start_date: date
    end_date: date
    total_calendar_days: int
    business_days: int
    excluded_days: List[ExcludedDay]
