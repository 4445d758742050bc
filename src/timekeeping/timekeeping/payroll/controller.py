from __future__ import annotations

from flask import Flask

from ..common.http import date_arg, json_body, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/employees/<int:employee_id>/payroll-inputs", methods=["GET"], endpoint="payroll_inputs")
    def inputs(employee_id: int):
        start, end = date_arg("start_date"), date_arg("end_date")
        if start is None or end is None:
            raise ValidationError("start_date and end_date are required")
        return ok(service.collect_inputs(employee_id, start_date=start, end_date=end))

    @app.route(
        "/api/payroll-periods/<int:period_id>/employees/<int:employee_id>/inputs",
        methods=["GET"],
        endpoint="payroll_period_inputs",
    )
    def period_inputs(period_id: int, employee_id: int):
        return ok(service.inputs_for_period(employee_id, period_id))

    @app.route(
        "/api/payroll-periods/<int:period_id>/employees/<int:employee_id>/record",
        methods=["POST"],
        endpoint="payroll_materialize",
    )
    def materialize(period_id: int, employee_id: int):
        data = json_body()
        record = service.materialize(
            period_id,
            employee_id,
            benefits=data.get("benefits", 0),
            other_deductions=data.get("other_deductions", 0),
        )
        return ok(record, 201)
