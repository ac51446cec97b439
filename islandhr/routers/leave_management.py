import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from islandhr import db
from islandhr.config import settings
from islandhr.exceptions import LeaveValidationError, get_forbidden_exception, get_unknown_entity_exception
from islandhr.models.leaves import LeaveStatus, LeaveType
from islandhr.schemas.leave import (CreateLeaveApplication, LeaveApplicationResponse, LeaveList,
                                    LeavesCount, LeaveTypeSummary, RejectLeave)
from islandhr.utils.app_utils import get_current_user, display_name
from islandhr.utils.activity_utils import record_hr_action
from islandhr.utils.calendar_utils import HolidayCalendar, get_holiday_calendar, get_weekly_off_day
from islandhr.utils.employee_utils import employees_by_id, find_employee
from islandhr.utils.leave_utils import (apply_status_transition, application_from_document,
                                        application_to_document, create_application, filter_applications,
                                        get_leave_type_counts_for_year, get_monthly_leave_distribution,
                                        summarize_applications)

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(document: dict, employee: Optional[dict] = None) -> dict:
    application = application_from_document(document)
    row = application.model_dump()
    row["leave_id"] = str(document["_id"])
    row["status"] = LeaveStatus(application.status).value
    row["leave_type"] = LeaveType(application.leave_type).value
    if employee:
        row["employee_name"] = employee.get("name")
        row["department"] = employee.get("department")
    return row


async def _get_application_document(leave_id: str) -> dict:
    try:
        object_id = ObjectId(leave_id)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=404, detail="Leave not found")

    document = await db.leave_applications_collection.find_one({"_id": object_id})
    if not document:
        raise HTTPException(status_code=404, detail="Leave not found")
    return document


@router.get("/health")
async def health_check():
    """
    Health check endpoint to verify if the service is running.
    Returns:
        dict: A simple message indicating the service is running.
    """
    return {"message": "Leave Management Service is running"}


@router.post("/applications", status_code=status.HTTP_201_CREATED, response_model=LeaveApplicationResponse)
async def submit_leave_application(
    leave_request: CreateLeaveApplication,
    user_and_type: tuple = Depends(get_current_user),
    calendar: HolidayCalendar = Depends(get_holiday_calendar),
    weekly_off_day: int = Depends(get_weekly_off_day),
):
    """
    Create a new leave application.
    Admins may apply on behalf of any employee; employees only for themselves
    (employee_id defaults to the caller's own).
    Returns:
        dict: The stored application with its calendar and business day totals.
    Raises:
        HTTPException:
            - 400: If a required field is missing or the end date is not after the start date
            - 403: If an employee applies for someone else
            - 404: If the employee is not in the directory
    """
    user, user_type = user_and_type

    employee_id = leave_request.employee_id
    if user_type == "employee":
        employee_id = employee_id or user.get("employee_id")
        if employee_id != user.get("employee_id"):
            raise get_forbidden_exception()

    try:
        application = create_application(
            employee_id=employee_id,
            leave_type=leave_request.leave_type,
            start_date=leave_request.start_date,
            end_date=leave_request.end_date,
            reason=leave_request.reason,
            emergency_contact=leave_request.emergency_contact,
            emergency_phone=leave_request.emergency_phone,
            medical_certificate=leave_request.medical_certificate,
            calendar=calendar,
            weekly_off_day=weekly_off_day,
            allow_single_day=settings.ALLOW_SINGLE_DAY_LEAVE,
            max_range_days=settings.MAX_RANGE_DAYS,
        )
    except LeaveValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    employee = await find_employee(application.employee_id)
    if not employee:
        raise get_unknown_entity_exception()

    document = application_to_document(application)
    result = await db.leave_applications_collection.insert_one(document)
    if result.inserted_id is None:
        raise HTTPException(status_code=400, detail="Leave request not created")

    logger.info(
        "Leave application %s submitted for %s (%s, %d business days)",
        result.inserted_id, application.employee_id, document["leave_type"], application.business_days,
    )

    document["_id"] = result.inserted_id
    return _to_response(document, employee)


@router.get("/leaves-count", response_model=LeavesCount)
async def get_leaves_count(user_and_type: tuple = Depends(get_current_user)):
    """
    Get leave application counts per status and per leave type.
    Raises:
        HTTPException:
            - 403: If user is not an admin
    """
    _, user_type = user_and_type

    if user_type != "admin":
        raise get_forbidden_exception()

    documents = await db.leave_applications_collection.find({}).to_list(length=None)
    summary = summarize_applications(application_from_document(d) for d in documents)

    return {
        "leave_count": summary["total_applications"],
        "pending_leave_count": summary["pending_count"],
        "approved_leave_count": summary["approved_count"],
        "rejected_leave_count": summary["rejected_count"],
        "cancelled_leave_count": summary["cancelled_count"],
        "leave_type_breakdown": summary["leave_type_breakdown"],
    }


@router.get("/", status_code=status.HTTP_200_OK, response_model=LeaveList)
async def list_leaves(
    status: Optional[LeaveStatus] = Query(
        None,
        description="Search by pending, approved, rejected or cancelled"
    ),
    leave_type: Optional[LeaveType] = Query(None),
    department: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches employee name, id or department"),
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    limit: int = Query(10, ge=1, le=100, description="Number of items to return"),
    user_and_type: tuple = Depends(get_current_user)
):
    """
    List leave applications with optional filters and pagination, newest first.
    Raises:
        HTTPException:
            - 403: If user is not an admin
    """
    _, user_type = user_and_type

    if user_type != "admin":
        raise get_forbidden_exception()

    employees = await employees_by_id()
    rows = []
    async for document in db.leave_applications_collection.find({}):
        rows.append(_to_response(document, employees.get(document.get("employee_id"))))

    rows = filter_applications(
        rows,
        status=status.value if status else None,
        leave_type=leave_type.value if leave_type else None,
        department=department,
        search=search,
    )

    return {
        "leave_data": rows[skip:skip + limit],
        "total": len(rows),
        "skip": skip,
        "limit": limit,
    }


async def _transition(leave_id: str, new_status: LeaveStatus, user_and_type: tuple, rejection_reason=None):
    user, user_type = user_and_type

    if user_type != "admin" and new_status != LeaveStatus.CANCELLED:
        raise get_forbidden_exception()

    document = await _get_application_document(leave_id)
    if user_type != "admin" and document["employee_id"] != user.get("employee_id"):
        raise get_forbidden_exception()

    application = application_from_document(document)
    try:
        updated = apply_status_transition(
            application,
            new_status,
            actor=display_name(user),
            rejection_reason=rejection_reason,
        )
    except LeaveValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    changes = {
        "status": new_status.value,
        "updated_at": updated.updated_at,
        "approved_by": updated.approved_by,
        "approved_date": updated.approved_date,
        "rejection_reason": updated.rejection_reason,
    }
    await db.leave_applications_collection.update_one({"_id": document["_id"]}, {"$set": changes})
    logger.info("Leave application %s moved from %s to %s by %s",
                leave_id, LeaveStatus(application.status).value, new_status.value, display_name(user))

    if user_type == "admin":
        await record_hr_action(user, "leave", new_status.value, subject=leave_id)

    document.update(changes)
    return _to_response(document)


@router.post("/{leave_id}/approve", response_model=LeaveApplicationResponse)
async def approve_leave(leave_id: str, user_and_type: tuple = Depends(get_current_user)):
    """
    Approve a pending leave application, stamping the approver and approval time.
    Raises:
        HTTPException:
            - 403: If the user is not an admin
            - 404: If the leave application is not found
            - 400: If the application is no longer pending
    """
    return await _transition(leave_id, LeaveStatus.APPROVED, user_and_type)


@router.post("/{leave_id}/reject", response_model=LeaveApplicationResponse)
async def reject_leave(
    leave_id: str,
    rejection: Optional[RejectLeave] = None,
    user_and_type: tuple = Depends(get_current_user)
):
    """
    Reject a pending leave application with an optional reason.
    """
    reason = rejection.rejection_reason if rejection else None
    return await _transition(leave_id, LeaveStatus.REJECTED, user_and_type, rejection_reason=reason)


@router.post("/{leave_id}/cancel", response_model=LeaveApplicationResponse)
async def cancel_leave(leave_id: str, user_and_type: tuple = Depends(get_current_user)):
    """
    Cancel a pending or approved leave application. Employees may cancel their own.
    """
    return await _transition(leave_id, LeaveStatus.CANCELLED, user_and_type)


@router.get("/leave-type-distribution", response_model=LeaveTypeSummary)
async def leave_type_distribution(
    year: Optional[int] = Query(None, description="Year to summarize (default: current year)"),
    user_and_type: tuple = Depends(get_current_user)
):
    """
    Returns the approved business days taken for each leave type in the specified year.
    Only accessible by admin users.
    """
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()
    year = year or datetime.now(UTC).year
    leave_type_counts = await get_leave_type_counts_for_year(year)
    return {"leave_type_counts": leave_type_counts, "year": year}


@router.get("/monthly-leave-distribution")
async def monthly_leave_distribution(user_and_type: tuple = Depends(get_current_user)):
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    distribution = await get_monthly_leave_distribution()
    return {"distribution": distribution}
