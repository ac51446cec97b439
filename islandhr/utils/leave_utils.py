import logging
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from pytz import timezone

from islandhr import db
from islandhr.exceptions import InvalidRangeError, InvalidTransitionError, MissingFieldError
from islandhr.models.leaves import LeaveApplication, LeaveStatus, LeaveType
from islandhr.utils.calendar_utils import HolidayCalendar, count_business_days

UTC = timezone("UTC")

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    LeaveStatus.PENDING: {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED},
    LeaveStatus.APPROVED: {LeaveStatus.CANCELLED},
    LeaveStatus.REJECTED: set(),
    LeaveStatus.CANCELLED: set(),
}

MONTH_ORDER = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]

DATE_FIELDS = ("start_date", "end_date")


def create_application(
    *,
    employee_id: Optional[str],
    leave_type: Optional[LeaveType],
    start_date: Optional[date],
    end_date: Optional[date],
    calendar: HolidayCalendar,
    weekly_off_day: int,
    reason: Optional[str] = None,
    emergency_contact: Optional[str] = None,
    emergency_phone: Optional[str] = None,
    medical_certificate: bool = False,
    allow_single_day: bool = False,
    max_range_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> LeaveApplication:
    """
    Validate a leave request and build the pending application for it.

    Raises MissingFieldError when the employee, leave type or either date is
    absent, and InvalidRangeError when the end date is not after the start date
    (same-day requests pass only with allow_single_day) or the request covers
    more than max_range_days calendar days.
    """
    required = {
        "employee_id": employee_id,
        "leave_type": leave_type,
        "start_date": start_date,
        "end_date": end_date,
    }
    missing = [name for name, value in required.items() if value in (None, "")]
    if missing:
        raise MissingFieldError(missing)

    if end_date < start_date or (end_date == start_date and not allow_single_day):
        raise InvalidRangeError()

    now = now or datetime.now(UTC)
    total_calendar_days = (end_date - start_date).days + 1
    if max_range_days is not None and total_calendar_days > max_range_days:
        raise InvalidRangeError(f"Leave cannot span more than {max_range_days} days")
    business_days = count_business_days(start_date, end_date, calendar, weekly_off_day)

    return LeaveApplication(
        employee_id=employee_id,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        total_calendar_days=total_calendar_days,
        business_days=business_days,
        reason=reason,
        status=LeaveStatus.PENDING,
        applied_date=now,
        emergency_contact=emergency_contact,
        emergency_phone=emergency_phone,
        medical_certificate=medical_certificate,
        updated_at=now,
    )


def apply_status_transition(
    application: LeaveApplication,
    new_status: LeaveStatus,
    actor: Optional[str] = None,
    rejection_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LeaveApplication:
    """Return a copy of the application moved to new_status, stamped with actor and time."""
    current = LeaveStatus(application.status)
    new_status = LeaveStatus(new_status)
    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, new_status.value)

    now = now or datetime.now(UTC)
    changes = {"status": new_status, "updated_at": now}
    if new_status == LeaveStatus.APPROVED:
        changes["approved_by"] = actor
        changes["approved_date"] = now
    elif new_status == LeaveStatus.REJECTED:
        changes["rejection_reason"] = rejection_reason

    return application.model_copy(update=changes)


def application_to_document(application: LeaveApplication) -> dict:
    """Mongo stores datetimes only, so calendar dates are kept as midnight."""
    document = application.model_dump(mode="python")
    for field in DATE_FIELDS:
        document[field] = datetime.combine(document[field], time.min)
    document["leave_type"] = application.leave_type.value
    document["status"] = LeaveStatus(application.status).value
    return document


def application_from_document(document: dict) -> LeaveApplication:
    data = {key: value for key, value in document.items() if key != "_id"}
    for field in DATE_FIELDS:
        if isinstance(data.get(field), datetime):
            data[field] = data[field].date()
    return LeaveApplication(**data)


def summarize_applications(applications: Iterable[LeaveApplication]) -> dict:
    applications = list(applications)
    status_counts = Counter(LeaveStatus(app.status).value for app in applications)
    type_counts = Counter(LeaveType(app.leave_type).value for app in applications)
    return {
        "total_applications": len(applications),
        "pending_count": status_counts[LeaveStatus.PENDING.value],
        "approved_count": status_counts[LeaveStatus.APPROVED.value],
        "rejected_count": status_counts[LeaveStatus.REJECTED.value],
        "cancelled_count": status_counts[LeaveStatus.CANCELLED.value],
        "leave_type_breakdown": {leave_type.value: type_counts[leave_type.value] for leave_type in LeaveType},
    }


def filter_applications(
    applications: Iterable[dict],
    status: Optional[str] = None,
    leave_type: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
) -> List[dict]:
    """
    Filter application rows (application fields plus employee_name/department)
    and sort them newest first by applied date.
    """
    needle = (search or "").strip().lower()

    def matches(row):
        if status and row.get("status") != status:
            return False
        if leave_type and row.get("leave_type") != leave_type:
            return False
        if department and row.get("department") != department:
            return False
        if needle:
            haystack = [row.get("employee_name"), row.get("employee_id"), row.get("department")]
            if not any(needle in (value or "").lower() for value in haystack):
                return False
        return True

    rows = [row for row in applications if matches(row)]
    rows.sort(key=lambda row: (row["applied_date"], row.get("leave_id", "")), reverse=True)
    return rows


def monthly_distribution(start_dates: Iterable[datetime]) -> List[dict]:
    month_counter = Counter()
    for start_date in start_dates:
        if isinstance(start_date, (date, datetime)):
            month_counter[start_date.strftime("%B")] += 1

    total_leaves = sum(month_counter.values())
    if not total_leaves:
        return []

    distribution = [
        {"month": month, "percentage": round((count / total_leaves) * 100)}
        for month, count in month_counter.items()
    ]
    distribution.sort(key=lambda x: MONTH_ORDER.index(x["month"]))
    return distribution


async def get_monthly_leave_distribution(now: Optional[datetime] = None):
    """Share of applications starting in each month over the last 180 days."""
    now = now or datetime.now(UTC)
    six_months_ago = now.replace(tzinfo=None) - timedelta(days=180)

    leaves = await db.leave_applications_collection.find({
        "start_date": {"$gte": six_months_ago}
    }).to_list(length=None)

    return monthly_distribution(leave.get("start_date") for leave in leaves)


async def get_leave_type_counts_for_year(year: int):
    """
    Total approved business days per leave type for applications starting in the given year.
    """
    start_date = datetime(year, 1, 1)
    end_date = datetime(year + 1, 1, 1)
    leaves = await db.leave_applications_collection.find({
        "status": LeaveStatus.APPROVED.value,
        "start_date": {"$gte": start_date, "$lt": end_date}
    }).to_list(length=None)

    totals = Counter()
    for leave in leaves:
        totals[leave["leave_type"]] += leave.get("business_days", 0)
    return dict(totals)
