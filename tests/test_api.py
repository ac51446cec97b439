from datetime import date, timedelta

import pytest

from islandhr.main import app
from islandhr.utils.calendar_utils import get_weekly_off_day, weekday_index
from conftest import EMPLOYEE_EMAIL, EMPLOYEE_PASSWORD, run


def _submit(client, headers, **overrides):
    body = {
        "employee_id": "EMP001",
        "leave_type": "annual",
        "start_date": "2025-01-05",
        "end_date": "2025-01-14",
        "reason": "Family visit",
    }
    body.update(overrides)
    return client.post("/leave-management/applications", json=body, headers=headers)


# holidays

def test_list_bundled_holidays(client):
    response = client.get("/holidays/")
    assert response.status_code == 200
    assert len(response.json()["holidays"]) == 7


def test_check_holiday(client):
    response = client.get("/holidays/check", params={"day": "2025-01-01"})
    assert response.json() == {"date": "2025-01-01", "is_holiday": True, "name": "New Year Day"}

    response = client.get("/holidays/check", params={"day": "2025-01-02"})
    assert response.json()["is_holiday"] is False


def test_business_days_endpoint(client):
    response = client.get("/holidays/business-days",
                          params={"start_date": "2025-01-01", "end_date": "2025-01-03"})
    body = response.json()
    assert body["total_calendar_days"] == 3
    assert body["business_days"] == 1
    assert body["excluded_days"] == [
        {"date": "2025-01-01", "reason": "New Year Day"},
        {"date": "2025-01-03", "reason": "off-day"},
    ]


def test_business_days_with_configured_off_day(client):
    app.dependency_overrides[get_weekly_off_day] = lambda: weekday_index("THURSDAY")
    try:
        response = client.get("/holidays/business-days",
                              params={"start_date": "2025-01-01", "end_date": "2025-01-03"})
    finally:
        app.dependency_overrides.clear()
    assert response.json()["business_days"] == 1
    assert response.json()["excluded_days"][1] == {"date": "2025-01-02", "reason": "off-day"}


def test_business_days_inverted_range_is_zero(client):
    response = client.get("/holidays/business-days",
                          params={"start_date": "2025-01-10", "end_date": "2025-01-03"})
    assert response.status_code == 200
    assert response.json()["business_days"] == 0
    assert response.json()["total_calendar_days"] == 0


def test_business_days_up_to_last_representable_date(client):
    response = client.get("/holidays/business-days",
                          params={"start_date": "9999-12-30", "end_date": "9999-12-31"})
    assert response.status_code == 200
    body = response.json()
    assert body["total_calendar_days"] == 2
    assert body["business_days"] + len(body["excluded_days"]) == 2


def test_business_days_rejects_overlong_range(client):
    response = client.get("/holidays/business-days",
                          params={"start_date": "0001-01-01", "end_date": "9999-12-31"})
    assert response.status_code == 400
    assert "366" in response.json()["detail"]


# auth

def test_login_and_me(client, seeded_db):
    response = client.post("/auth/login", data={"username": EMPLOYEE_EMAIL, "password": EMPLOYEE_PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json() == {"email": EMPLOYEE_EMAIL, "name": "Rajesh Kumar Patel", "user_type": "employee"}


def test_login_with_wrong_password(client, seeded_db):
    response = client.post("/auth/login", data={"username": EMPLOYEE_EMAIL, "password": "nope"})
    assert response.status_code == 401


def test_first_admin_registers_and_manages_directory(client, mock_db):
    response = client.post("/auth/register-admin", json={
        "first_name": "Mariyam", "last_name": "Shifa",
        "email": "mariyam.shifa@islandhr.mv", "password": "first-admin",
    })
    assert response.status_code == 201
    assert run(mock_db.admins.find_one({"email": "mariyam.shifa@islandhr.mv"}))["password"] != "first-admin"

    login = client.post("/auth/login", data={"username": "mariyam.shifa@islandhr.mv", "password": "first-admin"})
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
    created = client.post("/employee-management/employees", headers=headers, json={
        "employee_id": "EMP011", "name": "Hussain Nazeer", "nationality": "Maldivian", "join_date": "2023-04-01",
    })
    assert created.status_code == 201


def test_admin_registration_closes_once_an_admin_exists(client, seeded_db):
    response = client.post("/auth/register-admin", json={
        "first_name": "Someone", "last_name": "Else", "email": "someone@islandhr.mv", "password": "pw",
    })
    assert response.status_code == 403
    assert run(seeded_db.admins.count_documents({})) == 1


def test_requests_without_token_are_rejected(client, seeded_db):
    assert client.get("/leave-management/").status_code == 401


# employees

def test_admin_registers_employee(client, admin_headers):
    response = client.post("/employee-management/employees", headers=admin_headers, json={
        "employee_id": "EMP003",
        "name": "Ali Hassan Khan",
        "nationality": "Pakistani",
        "join_date": "2021-06-01",
        "department": "Electrical",
    })
    assert response.status_code == 201
    assert response.json()["join_date"] == "2021-06-01"

    listing = client.get("/employee-management/employees", headers=admin_headers,
                         params={"department": "Electrical"})
    assert [e["employee_id"] for e in listing.json()["employees"]] == ["EMP003", "EMP004"]


def test_employee_listing_matches_nationality_loosely(client, admin_headers):
    listing = client.get("/employee-management/employees", headers=admin_headers,
                         params={"nationality": " maldivian "})
    assert [e["employee_id"] for e in listing.json()["employees"]] == ["EMP001"]


def test_duplicate_employee_is_rejected(client, admin_headers):
    response = client.post("/employee-management/employees", headers=admin_headers, json={
        "employee_id": "EMP001", "name": "Someone", "nationality": "Maldivian", "join_date": "2020-01-01",
    })
    assert response.status_code == 400


def test_employee_cannot_register_employees(client, employee_headers):
    response = client.post("/employee-management/employees", headers=employee_headers, json={
        "employee_id": "EMP009", "name": "Someone", "nationality": "Maldivian", "join_date": "2020-01-01",
    })
    assert response.status_code == 403


# leave applications

def test_submit_application(client, admin_headers, seeded_db):
    response = _submit(client, admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["total_calendar_days"] == 10
    assert body["business_days"] == 9
    assert body["employee_name"] == "Ahmed Hassan"
    assert run(seeded_db.leave_applications.count_documents({})) == 1


def test_submit_application_missing_field(client, admin_headers):
    response = _submit(client, admin_headers, leave_type=None)
    assert response.status_code == 400
    assert "leave_type" in response.json()["detail"]


def test_submit_same_day_application(client, admin_headers):
    response = _submit(client, admin_headers, start_date="2025-02-10", end_date="2025-02-10")
    assert response.status_code == 400
    assert response.json()["detail"] == "End date must be after start date"


def test_submit_overlong_application(client, admin_headers):
    response = _submit(client, admin_headers, start_date="2025-01-01", end_date="2027-01-01")
    assert response.status_code == 400
    assert response.json()["detail"] == "Leave cannot span more than 366 days"


def test_submit_for_unknown_employee(client, admin_headers):
    assert _submit(client, admin_headers, employee_id="EMP404").status_code == 404


def test_employee_applies_for_themself(client, employee_headers):
    response = _submit(client, employee_headers, employee_id=None, leave_type="medical")
    assert response.status_code == 201
    assert response.json()["employee_id"] == "EMP002"


def test_employee_cannot_apply_for_colleague(client, employee_headers):
    assert _submit(client, employee_headers, employee_id="EMP001").status_code == 403


def test_approve_application(client, admin_headers, seeded_db):
    leave_id = _submit(client, admin_headers).json()["leave_id"]

    response = client.post(f"/leave-management/{leave_id}/approve", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "approved"
    assert body["approved_by"] == "Aishath Niuma"
    assert body["approved_date"] is not None
    activity = run(seeded_db.system_activity.find_one({"area": "leave", "action": "approved"}))
    assert activity["subject"] == leave_id
    assert activity["admin_name"] == "Aishath Niuma"

    again = client.post(f"/leave-management/{leave_id}/approve", headers=admin_headers)
    assert again.status_code == 400


def test_reject_application_with_reason(client, admin_headers):
    leave_id = _submit(client, admin_headers).json()["leave_id"]
    response = client.post(f"/leave-management/{leave_id}/reject", headers=admin_headers,
                           json={"rejection_reason": "Project deadline"})
    assert response.json()["status"] == "rejected"
    assert response.json()["rejection_reason"] == "Project deadline"


def test_employee_cancels_own_application(client, admin_headers, employee_headers):
    leave_id = _submit(client, employee_headers, employee_id=None).json()["leave_id"]

    assert client.post(f"/leave-management/{leave_id}/approve", headers=employee_headers).status_code == 403

    response = client.post(f"/leave-management/{leave_id}/cancel", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_unknown_leave_id(client, admin_headers):
    assert client.post("/leave-management/not-an-id/approve", headers=admin_headers).status_code == 404
    assert client.post("/leave-management/65a1f0c2e4b0a1b2c3d4e5f6/approve",
                       headers=admin_headers).status_code == 404


def test_list_and_count_applications(client, admin_headers, employee_headers):
    first = _submit(client, admin_headers).json()["leave_id"]
    _submit(client, admin_headers, employee_id="EMP004", leave_type="emergency")
    _submit(client, employee_headers, employee_id=None, leave_type="medical")
    client.post(f"/leave-management/{first}/approve", headers=admin_headers)

    listing = client.get("/leave-management/", headers=admin_headers).json()
    assert listing["total"] == 3
    assert [row["employee_id"] for row in listing["leave_data"]] == ["EMP002", "EMP004", "EMP001"]

    pending = client.get("/leave-management/", headers=admin_headers, params={"status": "pending"}).json()
    assert pending["total"] == 2

    electrical = client.get("/leave-management/", headers=admin_headers,
                            params={"department": "Electrical"}).json()
    assert [row["employee_id"] for row in electrical["leave_data"]] == ["EMP004"]

    counts = client.get("/leave-management/leaves-count", headers=admin_headers).json()
    assert counts["leave_count"] == 3
    assert counts["approved_leave_count"] == 1
    assert counts["pending_leave_count"] == 2
    assert counts["leave_type_breakdown"]["emergency"] == 1

    assert client.get("/leave-management/", headers=employee_headers).status_code == 403


def test_leave_type_distribution(client, admin_headers):
    leave_id = _submit(client, admin_headers).json()["leave_id"]
    client.post(f"/leave-management/{leave_id}/approve", headers=admin_headers)
    _submit(client, admin_headers, leave_type="medical")

    response = client.get("/leave-management/leave-type-distribution", headers=admin_headers,
                          params={"year": 2025})
    assert response.json() == {"leave_type_counts": {"annual": 9}, "year": 2025}


def test_monthly_leave_distribution(client, admin_headers):
    start = date.today() + timedelta(days=3)
    _submit(client, admin_headers, start_date=start.isoformat(),
            end_date=(start + timedelta(days=4)).isoformat())

    response = client.get("/leave-management/monthly-leave-distribution", headers=admin_headers)
    assert response.json() == {"distribution": [{"month": start.strftime("%B"), "percentage": 100}]}


# leave balances

def test_eligibility_endpoint(client):
    response = client.get("/leave-balance/eligibility", params={
        "nationality": "Bangladeshi", "join_date": "2021-01-10", "years_of_service": 3.1,
    })
    assert response.json() == {
        "entitled_days": 60,
        "status": "eligible",
        "next_entitlement_date": "2025-01-10",
        "description": "60 days annual leave (eligible every 2 years after 2 years of service)",
    }


def test_employee_balance_reflects_approved_leave(client, admin_headers):
    leave_id = _submit(client, admin_headers).json()["leave_id"]
    client.post(f"/leave-management/{leave_id}/approve", headers=admin_headers)

    response = client.get("/leave-balance/EMP001", headers=admin_headers, params={"as_of": "2025-02-20"})
    body = response.json()
    assert body["eligibility"]["status"] == "eligible"
    assert body["eligibility"]["next_entitlement_date"] == "2026-01-15"
    assert body["balances"]["annual"] == {"entitled": 30, "used": 9, "remaining": 21}


def test_employee_reads_only_own_balance(client, employee_headers):
    assert client.get("/leave-balance/EMP002", headers=employee_headers).status_code == 200
    assert client.get("/leave-balance/EMP001", headers=employee_headers).status_code == 403


def test_unknown_employee_balance(client, admin_headers):
    assert client.get("/leave-balance/EMP404", headers=admin_headers).status_code == 404


def test_balance_listing_and_summary(client, admin_headers):
    params = {"as_of": "2024-02-20"}
    balances = client.get("/leave-balance/", headers=admin_headers, params=params).json()
    assert [b["employee_id"] for b in balances] == ["EMP001", "EMP004", "EMP002"]

    not_eligible = client.get("/leave-balance/", headers=admin_headers,
                              params={**params, "eligibility_status": "not-eligible"}).json()
    assert [b["employee_id"] for b in not_eligible] == ["EMP002"]

    summary = client.get("/leave-balance/summary", headers=admin_headers, params=params).json()
    assert summary["total_employees"] == 3
    assert summary["eligible_employees"] == 2
    assert summary["total_annual_entitled"] == 90


# insurance

@pytest.fixture
def insurance_records(client, admin_headers):
    today = date.today()
    payloads = [
        {"employee_id": "EMP004", "policy_number": "POL-001", "provider": "Allied",
         "start_date": (today - timedelta(days=300)).isoformat(),
         "expiry_date": (today + timedelta(days=200)).isoformat(),
         "payment_date": (today - timedelta(days=300)).isoformat()},
        {"employee_id": "EMP002", "policy_number": "POL-002", "provider": "Allied",
         "start_date": (today - timedelta(days=400)).isoformat(),
         "expiry_date": (today - timedelta(days=35)).isoformat(),
         "payment_date": (today - timedelta(days=400)).isoformat()},
        {"employee_id": "EMP001", "policy_number": "POL-003", "provider": "Ensure",
         "start_date": today.isoformat(),
         "expiry_date": (today + timedelta(days=365)).isoformat()},
    ]
    return [client.post("/insurance/", headers=admin_headers, json=p) for p in payloads]


def test_insurance_status_is_computed(client, admin_headers, insurance_records):
    assert [r.status_code for r in insurance_records] == [201, 201, 201]
    assert [r.json()["status"] for r in insurance_records] == ["paid-completed", "expired", "pending"]

    listing = client.get("/insurance/", headers=admin_headers, params={"status": "expired"}).json()
    assert [r["policy_number"] for r in listing["records"]] == ["POL-002"]
    assert listing["status_counts"] == {"pending": 1, "expired": 1, "expiring": 0, "paid-completed": 1}

    counts = client.get("/insurance/status-counts", headers=admin_headers).json()
    assert counts == listing["status_counts"]


def test_insurance_validation(client, admin_headers, insurance_records):
    duplicate = client.post("/insurance/", headers=admin_headers, json={
        "employee_id": "EMP004", "policy_number": "POL-001", "provider": "Allied",
        "start_date": "2025-01-01", "expiry_date": "2026-01-01",
    })
    assert duplicate.status_code == 400

    inverted = client.post("/insurance/", headers=admin_headers, json={
        "employee_id": "EMP004", "policy_number": "POL-009", "provider": "Allied",
        "start_date": "2025-01-01", "expiry_date": "2024-01-01",
    })
    assert inverted.status_code == 400

    unknown = client.post("/insurance/", headers=admin_headers, json={
        "employee_id": "EMP404", "policy_number": "POL-010", "provider": "Allied",
        "start_date": "2025-01-01", "expiry_date": "2026-01-01",
    })
    assert unknown.status_code == 404
