from datetime import date, datetime, timezone
from enum import Enum
from pydantic import BaseModel
from typing import Optional

UTC = timezone.utc


class LeaveType(str, Enum):
    ANNUAL = "annual"
    MEDICAL = "medical"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    EMERGENCY = "emergency"
    NO_PAY = "no-pay"
    HAJJ = "hajj"
    UMRAH = "umrah"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveApplication(BaseModel):
    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_calendar_days: int
    business_days: int
    reason: Optional[str] = None
    status: LeaveStatus = LeaveStatus.PENDING
    applied_date: datetime
    approved_by: Optional[str] = None
    approved_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    medical_certificate: bool = False
    updated_at: Optional[datetime] = None
