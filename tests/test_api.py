from __future__ import annotations

import io

import pytest
from openpyxl import load_workbook

from src.leave_portal.leave_portal.common.datetime_utils import today_local
from src.leave_portal.leave_portal.container import build_services
from src.leave_portal.leave_portal.core.enums import RequestSource, RequestStatus, RequestType
from src.leave_portal.leave_portal.main import create_app
from src.leave_portal.leave_portal.requests.model import NewRequest


@pytest.fixture
def app(users_repo, requests_repo):
    container = build_services(users_repo=users_repo, requests_repo=requests_repo, random_seed=42)
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def _login_as(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["name"] = "Test"
        sess["role"] = role


def test_login_sets_session(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    assert resp.get_json()["roles"] == ["admin"]

    with client.session_transaction() as sess:
        assert sess["user_id"] == 1
        assert sess["role"] == "admin"


def test_login_with_bad_password_is_401(client):
    resp = client.post("/auth/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_weekly_wfh_requires_login(client):
    assert client.get("/requests/weekly-wfh").status_code == 401


def test_weekly_wfh_returns_saturday_to_friday(client):
    _login_as(client, 2, "employee")
    data = client.get("/requests/weekly-wfh?offset=0").get_json()
    days = data["weekDays"]
    assert len(days) == 7
    assert days[0]["dayShort"] == "Sat"
    assert days[-1]["dayShort"] == "Fri"
    assert days[-1]["isHoliday"] is True
    assert data["weekRange"] == {"start": days[0]["date"], "end": days[-1]["date"]}


def test_weekly_wfh_rejects_bad_offset(client):
    _login_as(client, 2, "employee")
    resp = client.get("/requests/weekly-wfh?offset=soon")
    assert resp.status_code == 400


def test_random_wfh_is_admin_only(client):
    _login_as(client, 2, "employee")
    resp = client.post("/requests/random-wfh", json={"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 1})
    assert resp.status_code == 403


def test_random_wfh_creates_records(client, requests_repo):
    _login_as(client, 1, "admin")
    resp = client.post(
        "/requests/random-wfh",
        json={"selectedEmployeeIds": ["2", "3"], "numberOfDaysPerEmployee": 3, "weekOffset": 1},
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["totalCreated"] == 6
    assert [a["employeeId"] for a in body["assignments"]] == ["2", "3"]
    assert all(len(a["dates"]) == 3 for a in body["assignments"])

    created = requests_repo.all()
    assert len(created) == 6
    assert {r.source for r in created} == {RequestSource.BULK_GENERATED}
    assert {r.status for r in created} == {RequestStatus.APPROVED}


@pytest.mark.parametrize(
    "payload",
    [
        {"selectedEmployeeIds": [], "numberOfDaysPerEmployee": 1},
        {"selectedEmployeeIds": ["2", "2"], "numberOfDaysPerEmployee": 1},
        {"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 0},
        {"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 7},
        {"selectedEmployeeIds": "2", "numberOfDaysPerEmployee": 1},
        {"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 6.9},
        {"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": True},
        {"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 2, "weekOffset": 1.5},
    ],
)
def test_random_wfh_invalid_input_is_400(client, requests_repo, payload):
    _login_as(client, 1, "admin")
    resp = client.post("/requests/random-wfh", json=payload)
    assert resp.status_code == 400
    assert requests_repo.all() == []


def test_random_wfh_storage_failure_is_500(client, requests_repo):
    _login_as(client, 1, "admin")
    requests_repo.fail_after = 1
    resp = client.post("/requests/random-wfh", json={"selectedEmployeeIds": ["2"], "numberOfDaysPerEmployee": 2})
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Failed to generate random WFH"
    assert len(requests_repo.all()) == 1


def test_employee_request_then_admin_approval(client, requests_repo):
    _login_as(client, 2, "employee")
    resp = client.post("/requests", json={"type": "WFH", "startDate": "2024-06-16", "endDate": "2024-06-17"})
    assert resp.status_code == 201
    request_id = resp.get_json()["id"]

    mine = client.get("/requests/my").get_json()
    assert mine[0]["status"] == "Pending"
    assert mine[0]["numberOfDays"] == 2

    _login_as(client, 1, "admin")
    assert client.patch(f"/requests/{request_id}", json={"status": "Approved"}).status_code == 200
    assert client.patch(f"/requests/{request_id}", json={"status": "Rejected"}).status_code == 400
    assert requests_repo.get(request_id=int(request_id)).status == RequestStatus.APPROVED


def test_admin_entry_counts_all_ranges(client, requests_repo):
    _login_as(client, 1, "admin")
    resp = client.post(
        "/requests/admin",
        json={
            "employeeId": "3",
            "type": "VACATION",
            "dateRanges": [
                {"startDate": "2024-06-09", "endDate": "2024-06-10"},
                {"startDate": "", "endDate": ""},
                {"startDate": "2024-06-16", "endDate": "2024-06-16"},
            ],
        },
    )
    assert resp.status_code == 201
    req = requests_repo.get(request_id=int(resp.get_json()["id"]))
    assert req.number_of_days == 3


def test_hr_export_downloads_workbook(client, requests_repo):
    _login_as(client, 1, "admin")
    client.post(
        "/requests/admin",
        json={"employeeId": "2", "type": "WFH", "startDate": "2024-06-09", "endDate": "2024-06-09"},
    )

    _login_as(client, 4, "hr")
    resp = client.get("/hr/export?type=WFH")
    assert resp.status_code == 200
    assert "attachment" in resp.headers["Content-Disposition"]

    ws = load_workbook(io.BytesIO(resp.data)).active
    assert ws.cell(row=2, column=3).value == "Omar Hassan"


def test_hr_export_is_forbidden_for_employees(client):
    _login_as(client, 2, "employee")
    assert client.get("/hr/export").status_code == 403


def test_my_week_returns_own_days_for_current_week(client, requests_repo):
    today = today_local()
    requests_repo.create(
        NewRequest(
            employee_id=2,
            type=RequestType.WFH,
            start_date=today,
            end_date=today,
            number_of_days=1,
            notes=None,
            status=RequestStatus.APPROVED,
            source=RequestSource.ADMIN_DIRECT,
        )
    )

    _login_as(client, 2, "employee")
    assert client.get("/requests/week").get_json() == [{"date": today.isoformat(), "type": "WFH"}]

    _login_as(client, 3, "employee")
    assert client.get("/requests/week").get_json() == []


def test_my_week_requires_login(client):
    assert client.get("/requests/week").status_code == 401


def _submit_three(client):
    _login_as(client, 2, "employee")
    for day in ("2024-06-16", "2024-06-17", "2024-06-18"):
        client.post("/requests", json={"type": "WFH", "startDate": day, "endDate": day})


def test_admin_listing_honours_limit(client):
    _submit_three(client)

    _login_as(client, 1, "admin")
    assert len(client.get("/requests?limit=2").get_json()) == 2
    assert len(client.get("/requests").get_json()) == 3
    assert len(client.get("/requests?status=Pending&limit=1").get_json()) == 1


def test_own_listing_honours_limit(client):
    _submit_three(client)
    assert len(client.get("/requests/my?limit=1").get_json()) == 1
    assert len(client.get("/requests?limit=2").get_json()) == 2


@pytest.mark.parametrize("url", ["/requests?limit=-1", "/requests?limit=0", "/requests?limit=many", "/requests/my?limit=-5"])
def test_bad_limit_is_400(client, url):
    _login_as(client, 1, "admin")
    assert client.get(url).status_code == 400


def test_admin_uses_admin_route_for_direct_entry(client):
    _login_as(client, 1, "admin")
    resp = client.post("/requests", json={"type": "WFH", "startDate": "2024-06-16", "endDate": "2024-06-16"})
    assert resp.status_code == 403
