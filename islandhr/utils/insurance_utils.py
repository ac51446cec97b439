from collections import Counter
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable

from islandhr.models.insurance import InsuranceRecord

DATE_FIELDS = ("start_date", "expiry_date", "payment_date")


class InsuranceStatus(str, Enum):
    PENDING = "pending"
    EXPIRED = "expired"
    EXPIRING = "expiring"
    PAID_COMPLETED = "paid-completed"


def calculate_insurance_status(record: InsuranceRecord, today: date, window_days: int = 30) -> InsuranceStatus:
    """
    Status is derived from the stored dates on every read:
    unpaid policies are pending, then expired, then expiring within the window.
    """
    if record.payment_date is None:
        return InsuranceStatus.PENDING

    if today > record.expiry_date:
        return InsuranceStatus.EXPIRED

    if today <= record.expiry_date <= today + timedelta(days=window_days):
        return InsuranceStatus.EXPIRING

    return InsuranceStatus.PAID_COMPLETED


def count_statuses(records: Iterable[InsuranceRecord], today: date, window_days: int = 30) -> dict:
    counts = Counter(calculate_insurance_status(r, today, window_days) for r in records)
    return {status.value: counts[status] for status in InsuranceStatus}


def record_to_document(record: InsuranceRecord) -> dict:
    document = record.model_dump(mode="python")
    for field in DATE_FIELDS:
        if document.get(field) is not None:
            document[field] = datetime.combine(document[field], time.min)
    return document


def record_from_document(document: dict) -> InsuranceRecord:
    data = {key: value for key, value in document.items() if key != "_id"}
    for field in DATE_FIELDS:
        if isinstance(data.get(field), datetime):
            data[field] = data[field].date()
    return InsuranceRecord(**data)
