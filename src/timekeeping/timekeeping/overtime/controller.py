from __future__ import annotations

from flask import Flask, request

from ..common.http import as_bool, as_date, as_int, date_arg, json_body, ok, require_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.overtime_service

    def _form(data: dict) -> dict:
        return {
            "employee_id": as_int(require_field(data, "employee_id"), "employee_id"),
            "request_date": as_date(require_field(data, "request_date"), "request_date"),
            "start_time": require_field(data, "start_time"),
            "end_time": require_field(data, "end_time"),
            "requested_hours": require_field(data, "requested_hours"),
            "reason": data.get("reason") or "",
        }

    @app.route("/api/overtime", methods=["POST"], endpoint="overtime_create")
    def create():
        return ok(service.create(**_form(json_body())), 201)

    @app.route("/api/overtime/validate", methods=["POST"], endpoint="overtime_validate")
    def validate():
        return ok(service.validate(**_form(json_body())))

    @app.route("/api/overtime/<int:request_id>", methods=["GET"], endpoint="overtime_get")
    def get(request_id: int):
        return ok(service.get(request_id))

    @app.route("/api/overtime/<int:request_id>/decision", methods=["POST"], endpoint="overtime_decide")
    def decide(request_id: int):
        data = json_body()
        decided = service.approve(
            request_id,
            as_int(require_field(data, "approver_id"), "approver_id"),
            as_bool(require_field(data, "approved"), "approved"),
            data.get("comments"),
        )
        return ok(decided)

    @app.route("/api/overtime/<int:request_id>", methods=["DELETE"], endpoint="overtime_delete")
    def delete(request_id: int):
        service.delete(request_id)
        return ok({"request_id": request_id})

    @app.route("/api/employees/<int:employee_id>/overtime", methods=["GET"], endpoint="overtime_list")
    def list_for_employee(employee_id: int):
        rows = service.list_for_employee(
            employee_id,
            status=request.args.get("status") or None,
            start_date=date_arg("start_date"),
            end_date=date_arg("end_date"),
        )
        return ok(rows)

    @app.route("/api/employees/<int:employee_id>/overtime/stats", methods=["GET"], endpoint="overtime_stats")
    def stats(employee_id: int):
        return ok(service.stats(employee_id, start_date=date_arg("start_date"), end_date=date_arg("end_date")))
