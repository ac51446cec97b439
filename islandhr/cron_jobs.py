import logging
from datetime import date, timedelta
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from islandhr import db
from islandhr.config import settings
from islandhr.utils.calendar_utils import today_in_reference_timezone
from islandhr.utils.eligibility_utils import resolve_eligibility, years_of_service
from islandhr.utils.employee_utils import employee_from_document
from islandhr.utils.insurance_utils import InsuranceStatus, calculate_insurance_status, record_from_document

logger = logging.getLogger(__name__)

# Create a shared scheduler instance
scheduler = AsyncIOScheduler(timezone=settings.TIMEZONE)


async def report_upcoming_entitlements(today: Optional[date] = None, horizon_days: int = 7):
    """Log employees whose next annual-leave cycle starts within the horizon."""
    today = today or today_in_reference_timezone()
    horizon = today + timedelta(days=horizon_days)
    upcoming = []
    try:
        async for document in db.employees_collection.find({"employment_status": "active"}):
            employee = employee_from_document(document)
            eligibility = resolve_eligibility(
                employee.get("nationality"),
                employee["join_date"],
                years_of_service(employee["join_date"], today),
            )
            next_date = eligibility["next_entitlement_date"]
            if next_date and today <= next_date <= horizon:
                upcoming.append(employee["employee_id"])
                logger.info("Employee %s enters a new entitlement cycle on %s", employee["employee_id"], next_date)
        logger.info("Entitlement check complete: %d upcoming", len(upcoming))
    except Exception:
        logger.exception("Error during entitlement check")
    return upcoming


async def report_expiring_insurance(today: Optional[date] = None):
    today = today or today_in_reference_timezone()
    flagged = []
    try:
        async for document in db.insurance_collection.find({}):
            record = record_from_document(document)
            record_status = calculate_insurance_status(record, today, settings.INSURANCE_EXPIRY_WINDOW_DAYS)
            if record_status in (InsuranceStatus.EXPIRING, InsuranceStatus.EXPIRED):
                flagged.append(record.policy_number)
                logger.warning("Insurance policy %s for %s is %s (expiry %s)",
                               record.policy_number, record.employee_id, record_status.value, record.expiry_date)
    except Exception:
        logger.exception("Error during insurance expiry check")
    return flagged


scheduler.add_job(
    report_upcoming_entitlements,
    "cron",
    hour=6,
    minute=0,
)

scheduler.add_job(
    report_expiring_insurance,
    "cron",
    hour=6,
    minute=30,
)
