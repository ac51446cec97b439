from datetime import datetime
from typing import Optional
from pytz import UTC
from islandhr import db
from islandhr.utils.app_utils import display_name


async def record_hr_action(admin: dict, area: str, action: str, subject: Optional[str] = None):
    """
    Append an HR console action to the system activity trail.

    Args:
        admin (dict): The acting admin's document.
        area (str): "employee", "leave" or "insurance".
        action (str): What was done, e.g. "created" or "approved".
        subject (str): Employee id, leave id or policy number acted on.
    """
    entry = {
        "admin_id": str(admin["_id"]),
        "admin_name": display_name(admin),
        "area": area,
        "action": action,
        "subject": subject,
        "timestamp": datetime.now(UTC),
    }
    await db.system_activity_collection.insert_one(entry)