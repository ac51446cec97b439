from datetime import date, datetime, timezone
from pydantic import BaseModel, Field
from typing import Optional

UTC = timezone.utc


class InsuranceRecord(BaseModel):
    employee_id: str
    policy_number: str
    provider: str
    policy_type: str = "medical"
    premium: float = 0.0
    start_date: date
    expiry_date: date
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
