from datetime import datetime, time
from typing import Optional

from islandhr import db


def employee_from_document(document: dict) -> dict:
    employee = {key: value for key, value in document.items() if key not in ("_id", "password")}
    if isinstance(employee.get("join_date"), datetime):
        employee["join_date"] = employee["join_date"].date()
    return employee


def employee_to_document(employee: dict) -> dict:
    document = dict(employee)
    join_date = document.get("join_date")
    if join_date is not None and not isinstance(join_date, datetime):
        document["join_date"] = datetime.combine(join_date, time.min)
    return document


async def find_employee(employee_id: str) -> Optional[dict]:
    document = await db.employees_collection.find_one({"employee_id": employee_id})
    if not document:
        return None
    return employee_from_document(document)


async def employees_by_id() -> dict:
    employees = {}
    async for document in db.employees_collection.find({}):
        employee = employee_from_document(document)
        employees[employee["employee_id"]] = employee
    return employees
