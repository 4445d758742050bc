from __future__ import annotations

from datetime import date, timedelta

from flask import Flask

from ..common.http import as_date, as_datetime, as_int, date_arg, json_body, ok, require_field
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import SessionType
from ..core.exceptions import ValidationError
from ..container import Container


def _session_type(value) -> SessionType | None:
    if value in (None, ""):
        return None
    try:
        return SessionType(value)
    except ValueError:
        raise ValidationError(f"Invalid session type: {value!r}")


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock", methods=["POST"], endpoint="attendance_clock")
    def clock():
        data = json_body()
        employee_id = as_int(require_field(data, "employee_id"), "employee_id")
        now = as_datetime(data["timestamp"], "timestamp") if data.get("timestamp") else None
        summary = service.record_clock_event(
            employee_id,
            session_type=_session_type(data.get("session_type")),
            now=now,
            selfie_data=data.get("selfie_image"),
            qr_code_hash=data.get("qr_code_hash"),
        )
        return ok(summary, 201)

    @app.route("/api/attendance/<int:employee_id>/day", methods=["GET"], endpoint="attendance_day")
    def day_summary(employee_id: int):
        work_date = date_arg("date", date.today())
        return ok(service.get_day_summary(employee_id, work_date))

    @app.route("/api/attendance/<int:employee_id>/history", methods=["GET"], endpoint="attendance_history")
    def history(employee_id: int):
        end = date_arg("end_date", date.today())
        start = date_arg("start_date", end - timedelta(days=DEFAULT_HISTORY_DAYS - 1))
        return ok(service.get_history(employee_id, start_date=start, end_date=end))

    @app.route("/api/attendance/<int:employee_id>/stats", methods=["GET"], endpoint="attendance_stats")
    def stats(employee_id: int):
        end = date_arg("end_date", date.today())
        start = date_arg("start_date", end.replace(day=1))
        return ok(service.get_stats(employee_id, start_date=start, end_date=end))

    @app.route("/api/attendance/sessions/<int:session_id>", methods=["PATCH"], endpoint="attendance_session_update")
    def update_session(session_id: int):
        data = json_body()
        timestamp = as_datetime(require_field(data, "timestamp"), "timestamp")
        return ok(service.update_session(session_id, timestamp))

    @app.route("/api/attendance/records", methods=["POST"], endpoint="attendance_record_create")
    def get_or_create_record():
        data = json_body()
        record = service.get_or_create_record(
            as_int(require_field(data, "employee_id"), "employee_id"),
            as_date(require_field(data, "date"), "date"),
        )
        return ok(record)
