from datetime import date
from pydantic import BaseModel
from typing import Optional, Dict, List
from islandhr.utils.insurance_utils import InsuranceStatus


class CreateInsuranceRecord(BaseModel):
    employee_id: str
    policy_number: str
    provider: str
    policy_type: str = "medical"
    premium: float = 0.0
    start_date: date
    expiry_date: date
    payment_date: Optional[date] = None
    notes: Optional[str] = None


class InsuranceRecordResponse(CreateInsuranceRecord):
    record_id: str
    status: InsuranceStatus


class InsuranceList(BaseModel):
    records: List[InsuranceRecordResponse]
    status_counts: Dict[str, int]
