import asyncio
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from islandhr import db
from islandhr.main import app
from islandhr.models.holidays import Holiday
from islandhr.utils.app_utils import create_access_token, hash_password
from islandhr.utils.calendar_utils import HolidayCalendar, WEEKDAY_NAME_TO_INDEX

COLLECTIONS = {
    "admins_collection": "admins",
    "employees_collection": "employees",
    "leave_applications_collection": "leave_applications",
    "insurance_collection": "insurance_records",
    "system_activity_collection": "system_activity",
}

ADMIN_EMAIL = "hr.manager@islandhr.mv"
EMPLOYEE_EMAIL = "rajesh.patel@islandhr.mv"
EMPLOYEE_PASSWORD = "s3cret-pass"

FRIDAY = WEEKDAY_NAME_TO_INDEX["FRIDAY"]


@pytest.fixture
def holiday_calendar():
    return HolidayCalendar([
        Holiday(date=date(2025, 1, 1), name="New Year Day"),
        Holiday(date=date(2025, 3, 31), name="Eid-ul Fithr"),
        Holiday(date=date(2025, 5, 1), name="Labour Day"),
        Holiday(date=date(2025, 7, 26), name="Independence Day"),
    ])


@pytest.fixture
def mock_db(monkeypatch):
    database = AsyncMongoMockClient()["island_hr_test"]
    for attribute, collection_name in COLLECTIONS.items():
        monkeypatch.setattr(db, attribute, database[collection_name])
    return database


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def seeded_db(mock_db):
    run(mock_db.admins.insert_one({
        "first_name": "Aishath",
        "last_name": "Niuma",
        "email": ADMIN_EMAIL,
        "password": hash_password("admin-pass"),
        "role": "admin",
    }))
    run(mock_db.employees.insert_many([
        {
            "employee_id": "EMP001",
            "name": "Ahmed Hassan",
            "nationality": "Maldivian",
            "department": "Construction",
            "designation": "Project Manager",
            "join_date": datetime(2022, 1, 15),
            "employment_status": "active",
        },
        {
            "employee_id": "EMP002",
            "name": "Rajesh Kumar Patel",
            "nationality": "Indian",
            "department": "Construction",
            "designation": "Site Engineer",
            "join_date": datetime(2023, 3, 10),
            "email": EMPLOYEE_EMAIL,
            "password": hash_password(EMPLOYEE_PASSWORD),
            "employment_status": "active",
        },
        {
            "employee_id": "EMP004",
            "name": "Mohammad Rahman",
            "nationality": "Bangladeshi",
            "department": "Electrical",
            "designation": "Electrician",
            "join_date": datetime(2021, 1, 10),
            "employment_status": "active",
        },
    ]))
    return mock_db


@pytest.fixture
def client():
    return TestClient(app)


def _auth_headers(email):
    token = create_access_token(payload={"sub": email}, expiry=timedelta(hours=1))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(seeded_db):
    return _auth_headers(ADMIN_EMAIL)


@pytest.fixture
def employee_headers(seeded_db):
    return _auth_headers(EMPLOYEE_EMAIL)


