from __future__ import annotations

from flask import Flask, request

from ..common.http import as_bool, as_date, as_int, date_arg, json_body, ok, require_field
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service
    requests = container.leave_request_service

    @app.route("/api/employees/<int:employee_id>/leave-balances", methods=["GET"], endpoint="leave_balances")
    def balances(employee_id: int):
        return ok(service.get_balances(employee_id))

    @app.route("/api/employees/<int:employee_id>/leave-balances/add", methods=["POST"], endpoint="leave_add")
    def add(employee_id: int):
        data = json_body()
        return ok(service.add_leave_days(employee_id, require_field(data, "leave_type"), require_field(data, "days")))

    @app.route("/api/employees/<int:employee_id>/leave-balances/use", methods=["POST"], endpoint="leave_use")
    def use(employee_id: int):
        data = json_body()
        balance = service.use_leave_days(employee_id, require_field(data, "leave_type"), require_field(data, "days"))
        if balance is None:
            return ok({"applied": False})
        return ok(balance)

    @app.route("/api/leave-balances/bulk", methods=["PUT"], endpoint="leave_bulk_upsert")
    def bulk_upsert():
        entries = json_body().get("balances")
        if not isinstance(entries, list):
            raise ValidationError("balances must be a list")
        return ok({"updated": service.bulk_upsert(entries)})

    @app.route("/api/employees/<int:employee_id>/leave-accruals", methods=["GET"], endpoint="leave_accruals")
    def accruals(employee_id: int):
        return ok(service.list_accruals(employee_id, start_date=date_arg("start_date"), end_date=date_arg("end_date")))

    # Leave requests
    @app.route("/api/leave-requests", methods=["POST"], endpoint="leave_request_create")
    def create_request():
        data = json_body()
        created = requests.create(
            as_int(require_field(data, "employee_id"), "employee_id"),
            require_field(data, "leave_type"),
            as_date(require_field(data, "start_date"), "start_date"),
            as_date(require_field(data, "end_date"), "end_date"),
            data.get("reason") or "",
        )
        return ok(created, 201)

    @app.route("/api/leave-requests/<int:request_id>", methods=["GET"], endpoint="leave_request_get")
    def get_request(request_id: int):
        return ok(requests.get(request_id))

    @app.route("/api/leave-requests/<int:request_id>/decision", methods=["POST"], endpoint="leave_request_decide")
    def decide_request(request_id: int):
        data = json_body()
        decided = requests.approve(
            request_id,
            as_int(require_field(data, "approver_id"), "approver_id"),
            as_bool(require_field(data, "approved"), "approved"),
            data.get("comments"),
        )
        return ok(decided)

    @app.route("/api/leave-requests/<int:request_id>", methods=["DELETE"], endpoint="leave_request_delete")
    def delete_request(request_id: int):
        requests.delete(request_id)
        return ok({"request_id": request_id})

    @app.route("/api/employees/<int:employee_id>/leave-requests", methods=["GET"], endpoint="leave_request_list")
    def list_requests(employee_id: int):
        return ok(requests.list_for_employee(employee_id, status=request.args.get("status") or None))
