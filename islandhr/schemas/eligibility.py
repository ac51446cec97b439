from datetime import date
from pydantic import BaseModel
from typing import Optional, Dict
from islandhr.utils.eligibility_utils import EligibilityStatus


class EligibilityResult(BaseModel):
    entitled_days: int
    status: EligibilityStatus
    next_entitlement_date: Optional[date] = None
    description: str


class LeaveTypeBalance(BaseModel):
    entitled: Optional[int] = None
    used: int = 0
    remaining: Optional[int] = None


class LeaveBalanceResponse(BaseModel):
    employee_id: str
    employee_name: Optional[str] = None
    nationality: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    join_date: date
    years_of_service: float
    eligibility: EligibilityResult
    balances: Dict[str, LeaveTypeBalance]


class LeaveBalanceSummary(BaseModel):
    total_employees: int
    eligible_employees: int
    not_eligible_employees: int
    total_annual_entitled: int
    total_annual_used: int
    total_annual_remaining: int
    utilization_rate: float
