from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from islandhr.models.leaves import LeaveStatus, LeaveType


class CreateLeaveApplication(BaseModel):
    employee_id: Optional[str] = None
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    medical_certificate: bool = False


class RejectLeave(BaseModel):
    rejection_reason: Optional[str] = None


class LeaveApplicationResponse(BaseModel):
    leave_id: str
    employee_id: str
    employee_name: Optional[str] = None
    department: Optional[str] = None
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_calendar_days: int
    business_days: int
    reason: Optional[str] = None
    status: LeaveStatus
    applied_date: datetime
    approved_by: Optional[str] = None
    approved_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None


class LeavesCount(BaseModel):
    leave_count: int
    pending_leave_count: int
    approved_leave_count: int
    rejected_leave_count: int
    cancelled_leave_count: int
    leave_type_breakdown: Dict[str, int]


class LeaveList(BaseModel):
    leave_data: List[LeaveApplicationResponse] = Field(
        ...,
        description="list of leave applications, newest first"
    )
    total: int
    skip: int
    limit: int

    class Config:
        json_schema_extra = {
            "example": {
                "leave_data": [
                    {
                        "leave_id": "65a1f0c2e4b0a1b2c3d4e5f6",
                        "employee_id": "EMP001",
                        "employee_name": "Ahmed Hassan",
                        "department": "Construction",
                        "leave_type": "annual",
                        "start_date": "2025-01-05",
                        "end_date": "2025-01-14",
                        "total_calendar_days": 10,
                        "business_days": 8,
                        "status": "pending",
                        "applied_date": "2024-12-20T08:30:00Z"
                    }
                ],
                "total": 1,
                "skip": 0,
                "limit": 10
            }
        }


class LeaveTypeSummary(BaseModel):
    leave_type_counts: Dict[str, int]
    year: int
