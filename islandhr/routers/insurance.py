import logging
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import Optional
from islandhr import db
from islandhr.config import settings
from islandhr.exceptions import get_forbidden_exception, get_unknown_entity_exception
from islandhr.models.insurance import InsuranceRecord
from islandhr.schemas.insurance import CreateInsuranceRecord, InsuranceList, InsuranceRecordResponse
from islandhr.utils.app_utils import get_current_user, display_name
from islandhr.utils.activity_utils import record_hr_action
from islandhr.utils.calendar_utils import today_in_reference_timezone
from islandhr.utils.employee_utils import find_employee
from islandhr.utils.insurance_utils import (InsuranceStatus, calculate_insurance_status, count_statuses,
                                            record_from_document, record_to_document)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(document: dict, today) -> dict:
    record = record_from_document(document)
    row = record.model_dump()
    row["record_id"] = str(document["_id"])
    row["status"] = calculate_insurance_status(record, today, settings.INSURANCE_EXPIRY_WINDOW_DAYS)
    return row


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=InsuranceRecordResponse)
async def create_insurance_record(record_request: CreateInsuranceRecord, user_and_type: tuple = Depends(get_current_user)):
    """
    Record an expatriate insurance policy for an employee.
    Raises:
        HTTPException:
            - 403: If user is not an admin
            - 404: If the employee is not in the directory
            - 400: If the expiry date is before the start date or the policy number is taken
    """
    user, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    if record_request.expiry_date < record_request.start_date:
        raise HTTPException(status_code=400, detail="Expiry date must not be before start date")

    if not await find_employee(record_request.employee_id):
        raise get_unknown_entity_exception()

    existing_record = await db.insurance_collection.find_one({"policy_number": record_request.policy_number})
    if existing_record:
        raise HTTPException(status_code=400, detail="Policy number already recorded")

    record = InsuranceRecord(**record_request.model_dump(), created_by=display_name(user))
    document = record_to_document(record)
    result = await db.insurance_collection.insert_one(document)
    document["_id"] = result.inserted_id
    logger.info("Insurance policy %s recorded for %s", record.policy_number, record.employee_id)

    await record_hr_action(user, "insurance", "created", subject=record.policy_number)

    return _to_response(document, today_in_reference_timezone())


@router.get("/", response_model=InsuranceList)
async def list_insurance_records(
    status: Optional[InsuranceStatus] = Query(None, description="Filter by computed status"),
    policy_type: Optional[str] = Query(None),
    employee_id: Optional[str] = Query(None),
    user_and_type: tuple = Depends(get_current_user),
):
    """
    List insurance records with their status computed from today's date.
    The status counts always cover every record, whatever the filters.
    """
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    today = today_in_reference_timezone()
    documents = await db.insurance_collection.find({}).sort("expiry_date", 1).to_list(length=None)
    rows = [_to_response(document, today) for document in documents]

    status_counts = count_statuses(
        (record_from_document(d) for d in documents), today, settings.INSURANCE_EXPIRY_WINDOW_DAYS
    )

    if status:
        rows = [row for row in rows if row["status"] == status]
    if policy_type:
        rows = [row for row in rows if row["policy_type"] == policy_type]
    if employee_id:
        rows = [row for row in rows if row["employee_id"] == employee_id]

    return {"records": rows, "status_counts": status_counts}


@router.get("/status-counts")
async def insurance_status_counts(user_and_type: tuple = Depends(get_current_user)):
    _, user_type = user_and_type
    if user_type != "admin":
        raise get_forbidden_exception()

    documents = await db.insurance_collection.find({}).to_list(length=None)
    return count_statuses(
        (record_from_document(d) for d in documents),
        today_in_reference_timezone(),
        settings.INSURANCE_EXPIRY_WINDOW_DAYS,
    )
