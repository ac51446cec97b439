from collections import defaultdict
from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from islandhr import db
from islandhr.exceptions import get_forbidden_exception, get_unknown_entity_exception
from islandhr.models.leaves import LeaveStatus
from islandhr.schemas.eligibility import EligibilityResult, LeaveBalanceResponse, LeaveBalanceSummary
from islandhr.utils.app_utils import get_current_user
from islandhr.utils.balance_utils import build_leave_balance, filter_balances, summarize_balances
from islandhr.utils.calendar_utils import today_in_reference_timezone
from islandhr.utils.eligibility_utils import EligibilityStatus, resolve_eligibility
from islandhr.utils.employee_utils import employees_by_id, find_employee
from islandhr.utils.leave_utils import application_from_document

router = APIRouter()


async def _approved_applications_by_employee(employee_id: Optional[str] = None) -> dict:
    query = {"status": LeaveStatus.APPROVED.value}
    if employee_id:
        query["employee_id"] = employee_id

    grouped = defaultdict(list)
    async for document in db.leave_applications_collection.find(query):
        application = application_from_document(document)
        grouped[application.employee_id].append(application)
    return grouped


async def _all_balances(as_of: date) -> list:
    employees = await employees_by_id()
    applications = await _approved_applications_by_employee()
    return [
        build_leave_balance(employee, applications.get(employee_id, []), as_of)
        for employee_id, employee in employees.items()
    ]


@router.get("/eligibility", response_model=EligibilityResult)
async def check_eligibility(
    nationality: str = Query(...),
    join_date: date = Query(...),
    years_of_service: float = Query(..., ge=0),
):
    """
    Resolve annual-leave eligibility straight from its inputs, without a directory lookup.
    """
    return resolve_eligibility(nationality, join_date, years_of_service)


@router.get("/", response_model=List[LeaveBalanceResponse])
async def list_leave_balances(
    nationality: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    eligibility_status: Optional[EligibilityStatus] = Query(None),
    search: Optional[str] = Query(None),
    as_of: Optional[date] = Query(None, description="Reference date (default: today)"),
    user_and_type: tuple = Depends(get_current_user),
):
    """
    Leave balances for every employee, sorted by name.
    Raises:
        HTTPException:
            - 403: If user is not an admin
    """
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    balances = await _all_balances(as_of or today_in_reference_timezone())
    return filter_balances(
        balances,
        nationality=nationality,
        department=department,
        eligibility_status=eligibility_status.value if eligibility_status else None,
        search=search,
    )


@router.get("/summary", response_model=LeaveBalanceSummary)
async def leave_balance_summary(
    as_of: Optional[date] = Query(None),
    user_and_type: tuple = Depends(get_current_user),
):
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    balances = await _all_balances(as_of or today_in_reference_timezone())
    return summarize_balances(balances)


@router.get("/{employee_id}", response_model=LeaveBalanceResponse)
async def get_leave_balance(
    employee_id: str,
    as_of: Optional[date] = Query(None),
    user_and_type: tuple = Depends(get_current_user),
):
    """
    Leave balance for one employee. Employees may only read their own.
    Raises:
        HTTPException:
            - 403: If an employee asks for someone else's balance
            - 404: If the employee is not in the directory
    """
    user, user_type = user_and_type
    if user_type != "admin" and user.get("employee_id") != employee_id:
        raise get_forbidden_exception()

    employee = await find_employee(employee_id)
    if not employee:
        raise get_unknown_entity_exception()

    applications = await _approved_applications_by_employee(employee_id)
    return build_leave_balance(employee, applications.get(employee_id, []), as_of or today_in_reference_timezone())
