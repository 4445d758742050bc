from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.timekeeping.timekeeping.main import create_app


@pytest.fixture
def client(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=world.container())
    return app.test_client()


def test_clock_event_returns_day_summary(client):
    resp = client.post("/api/attendance/clock", json={"employee_id": 1, "timestamp": "2026-03-02T07:58:00"})

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["state"] == "open"
    assert body["data"]["sessions"][0]["session_type"] == "morning_in"
    assert body["data"]["next_session_type"] == "morning_out"


def test_domain_errors_map_to_status_codes(client):
    resp = client.post("/api/attendance/clock", json={"employee_id": 2})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "EmployeeInactive"

    resp = client.post("/api/attendance/clock", json={"employee_id": 404})
    assert resp.status_code == 404

    resp = client.post("/api/attendance/clock", json={})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "employee_id is required"


def test_overtime_request_lifecycle(client):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    form = {
        "employee_id": 1,
        "request_date": tomorrow,
        "start_time": "18:00",
        "end_time": "20:00",
        "requested_hours": 2,
        "reason": "Release night support",
    }

    resp = client.post("/api/overtime", json=form)
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["request_id"]
    assert resp.get_json()["data"]["start_time"] == "18:00:00"

    resp = client.post(f"/api/overtime/{request_id}/decision", json={"approver_id": 9, "approved": True})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "approved"

    resp = client.post(f"/api/overtime/{request_id}/decision", json={"approver_id": 9, "approved": False})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "AlreadyProcessed"

    resp = client.get(f"/api/attendance/1/day?date={tomorrow}")
    assert resp.get_json()["data"]["hours"]["overtime_hours"] == 2.0


def test_overtime_validate_endpoint(client):
    resp = client.post(
        "/api/overtime/validate",
        json={
            "employee_id": 1,
            "request_date": "2020-01-01",
            "start_time": "18:00",
            "end_time": "20:00",
            "requested_hours": 2,
            "reason": "short",
        },
    )

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["is_valid"] is False
    assert "Cannot request overtime for past dates" in data["errors"]


def test_unknown_request_is_404(client):
    assert client.get("/api/overtime/77").status_code == 404
    assert client.get("/api/time-corrections/77").status_code == 404


def test_leave_endpoints(client):
    resp = client.post("/api/employees/1/leave-balances/add", json={"leave_type": "vacation", "days": 5})
    assert resp.get_json()["data"]["balance"] == 5.0

    resp = client.post("/api/employees/1/leave-balances/use", json={"leave_type": "vacation", "days": 10})
    assert resp.get_json()["data"]["balance"] == 0.0

    resp = client.post("/api/employees/1/leave-balances/use", json={"leave_type": "sick", "days": 1})
    assert resp.get_json()["data"] == {"applied": False}

    resp = client.put("/api/leave-balances/bulk", json={"balances": "nope"})
    assert resp.status_code == 400


def test_payroll_inputs_require_range(client):
    assert client.get("/api/employees/1/payroll-inputs").status_code == 400

    resp = client.get("/api/employees/1/payroll-inputs?start_date=2026-01-01&end_date=2026-01-31")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["days_recorded"] == 0


def test_payroll_materialize_endpoint(client, world):
    world.payroll_repo.add_period(1, date(2026, 1, 1), date(2026, 1, 31))

    resp = client.post("/api/payroll-periods/1/employees/1/record", json={"benefits": 25})

    assert resp.status_code == 201
    assert resp.get_json()["data"]["net_pay"] == 25.0
    assert client.post("/api/payroll-periods/5/employees/1/record", json={}).status_code == 404


def test_clock_event_rejects_utc_offset(client):
    resp = client.post("/api/attendance/clock", json={"employee_id": 1, "timestamp": "2026-03-02T08:30:00+07:00"})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ValidationError"

    resp = client.post("/api/attendance/clock", json={"employee_id": 1, "timestamp": "2026-03-02T07:58:00"})
    session_id = resp.get_json()["data"]["sessions"][0]["session_id"]
    resp = client.patch(f"/api/attendance/sessions/{session_id}", json={"timestamp": "2026-03-02T08:10:00Z"})
    assert resp.status_code == 400


def test_leave_request_endpoints(client, world):
    week_out = date.today() + timedelta(days=7)
    monday = week_out + timedelta(days=(7 - week_out.weekday()) % 7)
    client.post("/api/employees/1/leave-balances/add", json={"leave_type": "vacation", "days": 5})

    resp = client.post(
        "/api/leave-requests",
        json={
            "employee_id": 1,
            "leave_type": "vacation",
            "start_date": monday.isoformat(),
            "end_date": (monday + timedelta(days=4)).isoformat(),
            "reason": "Family trip",
        },
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["request_id"]
    assert resp.get_json()["data"]["total_days"] == 5.0

    resp = client.post(f"/api/leave-requests/{request_id}/decision", json={"approver_id": 9, "approved": True})
    assert resp.get_json()["data"]["status"] == "approved"
    assert world.leave.get_balance(1, "vacation") == 0

    assert client.get("/api/employees/1/leave-requests?status=approved").get_json()["data"][0]["request_id"] == request_id
    assert client.delete(f"/api/leave-requests/{request_id}").status_code == 409
    assert client.get("/api/leave-requests/404").status_code == 404


def test_leave_accruals_endpoint(client, world):
    world.leave.accrue_from_overtime(1, 3, "2", "0.25")

    rows = client.get("/api/employees/1/leave-accruals").get_json()["data"]

    assert rows[0]["overtime_request_id"] == 3
    assert rows[0]["leave_days"] == 0.25
