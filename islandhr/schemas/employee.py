from pydantic import BaseModel
from typing import Optional
from datetime import date


class CreateEmployee(BaseModel):
    employee_id: str
    name: str
    nationality: str
    join_date: date
    department: Optional[str] = None
    designation: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class EmployeeResponse(BaseModel):
    employee_id: str
    name: str
    nationality: str
    join_date: date
    department: Optional[str] = None
    designation: Optional[str] = None
    email: Optional[str] = None
    employment_status: str = "active"
