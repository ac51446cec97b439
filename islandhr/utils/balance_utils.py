from collections import defaultdict
from datetime import date
from typing import Iterable, List, Optional

from islandhr.models.leaves import LeaveApplication, LeaveStatus, LeaveType
from islandhr.utils.eligibility_utils import (EligibilityStatus, normalize_nationality, resolve_eligibility,
                                              years_of_service)

# Annual entitlement comes from the eligibility rules; None means uncapped.
DEFAULT_ENTITLEMENTS = {
    LeaveType.MEDICAL: 14,
    LeaveType.MATERNITY: 90,
    LeaveType.PATERNITY: 7,
    LeaveType.EMERGENCY: 5,
    LeaveType.NO_PAY: None,
    LeaveType.HAJJ: 30,
    LeaveType.UMRAH: 15,
}


def used_days_by_type(applications: Iterable[LeaveApplication]) -> dict:
    used = defaultdict(int)
    for application in applications:
        if LeaveStatus(application.status) == LeaveStatus.APPROVED:
            used[LeaveType(application.leave_type)] += application.business_days
    return used


def build_leave_balance(employee: dict, applications: Iterable[LeaveApplication], as_of: date) -> dict:
    """
    Leave balance for one employee as of a date.

    employee needs employee_id, nationality and join_date; applications are the
    employee's own, only approved ones count as used.
    """
    join_date = employee["join_date"]
    service_years = years_of_service(join_date, as_of)
    eligibility = resolve_eligibility(employee.get("nationality"), join_date, service_years)
    used = used_days_by_type(applications)

    balances = {}
    annual_used = used[LeaveType.ANNUAL]
    balances[LeaveType.ANNUAL.value] = {
        "entitled": eligibility["entitled_days"],
        "used": annual_used,
        "remaining": max(eligibility["entitled_days"] - annual_used, 0),
    }
    for leave_type, entitled in DEFAULT_ENTITLEMENTS.items():
        balances[leave_type.value] = {
            "entitled": entitled,
            "used": used[leave_type],
            "remaining": None if entitled is None else max(entitled - used[leave_type], 0),
        }

    return {
        "employee_id": employee["employee_id"],
        "employee_name": employee.get("name"),
        "nationality": employee.get("nationality"),
        "department": employee.get("department"),
        "designation": employee.get("designation"),
        "join_date": join_date,
        "years_of_service": round(service_years, 1),
        "eligibility": eligibility,
        "balances": balances,
    }


def filter_balances(
    balances: Iterable[dict],
    nationality: Optional[str] = None,
    department: Optional[str] = None,
    eligibility_status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[dict]:
    needle = (search or "").strip().lower()
    rows = []
    for balance in balances:
        if nationality and normalize_nationality(balance.get("nationality")) != normalize_nationality(nationality):
            continue
        if department and balance.get("department") != department:
            continue
        if eligibility_status and EligibilityStatus(balance["eligibility"]["status"]).value != eligibility_status:
            continue
        if needle and not any(
            needle in (value or "").lower()
            for value in (balance.get("employee_name"), balance.get("employee_id"), balance.get("department"))
        ):
            continue
        rows.append(balance)
    rows.sort(key=lambda b: (b.get("employee_name") or "").lower())
    return rows


def summarize_balances(balances: Iterable[dict]) -> dict:
    balances = list(balances)
    statuses = [EligibilityStatus(b["eligibility"]["status"]) for b in balances]
    total_entitled = sum(b["balances"]["annual"]["entitled"] for b in balances)
    total_used = sum(b["balances"]["annual"]["used"] for b in balances)
    total_remaining = sum(b["balances"]["annual"]["remaining"] for b in balances)

    return {
        "total_employees": len(balances),
        "eligible_employees": statuses.count(EligibilityStatus.ELIGIBLE),
        "not_eligible_employees": statuses.count(EligibilityStatus.NOT_ELIGIBLE),
        "total_annual_entitled": total_entitled,
        "total_annual_used": total_used,
        "total_annual_remaining": total_remaining,
        "utilization_rate": (total_used / total_entitled) * 100 if total_entitled > 0 else 0.0,
    }
