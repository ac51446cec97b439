import logging
import re
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import Optional
from islandhr import db
from islandhr.exceptions import get_forbidden_exception
from islandhr.models.employees import Employee
from islandhr.schemas.employee import CreateEmployee, EmployeeResponse
from islandhr.utils.app_utils import get_current_user, hash_password
from islandhr.utils.activity_utils import record_hr_action
from islandhr.utils.employee_utils import employee_from_document, employee_to_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/employees", status_code=status.HTTP_201_CREATED, response_model=EmployeeResponse)
async def create_employee(employee_request: CreateEmployee, user_and_type: tuple = Depends(get_current_user)):
    """
    Register an employee in the directory used for leave eligibility.
    Raises:
        HTTPException:
            - 403: If user is not an admin
            - 400: If the employee_id or email is already registered
    """
    user, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    query = {"employee_id": employee_request.employee_id}
    if employee_request.email:
        query = {"$or": [query, {"email": employee_request.email}]}
    existing_employee = await db.employees_collection.find_one(query)
    if existing_employee:
        raise HTTPException(status_code=400, detail="Employee already registered")

    employee_dict = employee_request.model_dump(exclude_unset=True)
    if employee_dict.get("password"):
        employee_dict["password"] = hash_password(employee_dict["password"])

    employee_instance = Employee(**employee_dict)
    await db.employees_collection.insert_one(employee_to_document(employee_instance.model_dump()))
    logger.info("Employee %s registered", employee_instance.employee_id)

    await record_hr_action(user, "employee", "created", subject=employee_instance.employee_id)

    return employee_from_document(employee_instance.model_dump())


@router.get("/employees", status_code=status.HTTP_200_OK)
async def list_employees(
    department: Optional[str] = Query(None),
    nationality: Optional[str] = Query(None),
    user_and_type: tuple = Depends(get_current_user)
):
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    query = {}
    if department:
        query["department"] = department
    if nationality:
        query["nationality"] = {"$regex": f"^\\s*{re.escape(nationality.strip())}\\s*$", "$options": "i"}

    employees = []
    async for document in db.employees_collection.find(query).sort("name", 1):
        employees.append(EmployeeResponse(**employee_from_document(document)))

    return {"employees": employees, "count": len(employees)}
