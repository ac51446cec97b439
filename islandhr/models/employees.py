from pydantic import BaseModel, Field
from datetime import datetime, timezone, date
from typing import Optional

UTC = timezone.utc


class Employee(BaseModel):
    employee_id: str
    name: str
    nationality: str
    department: Optional[str] = None
    designation: Optional[str] = None
    join_date: date
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    employment_status: str = "active"
    date_created: datetime = Field(default_factory=lambda: datetime.now(UTC))
