from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from islandhr.config import settings
from islandhr.schemas.holiday import BusinessDaysResult, HolidayLookupResult
from islandhr.utils.calendar_utils import (HolidayCalendar, count_business_days, excluded_days,
                                           get_holiday_calendar, get_weekly_off_day)

router = APIRouter()


@router.get("/", status_code=status.HTTP_200_OK)
async def list_holidays(calendar: HolidayCalendar = Depends(get_holiday_calendar)):
    """
    List the configured company holidays in date order.
    """
    return {"holidays": [{"date": h.date, "name": h.name} for h in calendar]}


@router.get("/check", response_model=HolidayLookupResult)
async def check_holiday(
    day: date = Query(..., description="Date to look up (YYYY-MM-DD)"),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
):
    lookup = calendar.is_holiday(day)
    return {"date": day, **lookup}


@router.get("/business-days", response_model=BusinessDaysResult)
async def business_days(
    start_date: date = Query(...),
    end_date: date = Query(...),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    weekly_off_day: int = Depends(get_weekly_off_day),
):
    """
    Count the working days in an inclusive date range.
    Args:
        start_date (date): First day of the range.
        end_date (date): Last day of the range.
    Returns:
        dict: calendar days, business days and every excluded day with its reason.
        An inverted range yields zero days.
    """
    total_calendar_days = max((end_date - start_date).days + 1, 0)
    if total_calendar_days > settings.MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range cannot span more than {settings.MAX_RANGE_DAYS} days",
        )

    return {
        "start_date": start_date,
        "end_date": end_date,
        "total_calendar_days": total_calendar_days,
        "business_days": count_business_days(start_date, end_date, calendar, weekly_off_day),
        "excluded_days": excluded_days(start_date, end_date, calendar, weekly_off_day),
    }
