from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import PayrollAmounts, PayrollInputs, PayrollPeriod, PayrollRecord
from .repository import PayrollRepository

_RECORD_COLUMNS = (
    "payroll_record_id, payroll_period_id, employee_id, base_salary, hourly_rate, "
    "total_worked_hours, total_regular_hours, total_overtime_hours, total_late_hours, "
    "late_deductions, gross_pay, net_pay, total_deductions, total_benefits, status, updated_at"
)
_DECIMAL_FIELDS = (
    "base_salary",
    "hourly_rate",
    "total_worked_hours",
    "total_regular_hours",
    "total_overtime_hours",
    "total_late_hours",
    "late_deductions",
    "gross_pay",
    "net_pay",
    "total_deductions",
    "total_benefits",
)


def _to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_record_id=int(r["payroll_record_id"]),
        payroll_period_id=int(r["payroll_period_id"]),
        employee_id=int(r["employee_id"]),
        status=PayrollStatus(r["status"]),
        updated_at=r.get("updated_at"),
        **{name: as_decimal(r[name]) for name in _DECIMAL_FIELDS},
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_period(self, payroll_period_id: int) -> Optional[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payroll_period_id, period_name, start_date, end_date, expected_hours
                FROM payroll_periods
                WHERE payroll_period_id=%s
                """,
                (int(payroll_period_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PayrollPeriod(
                payroll_period_id=int(r["payroll_period_id"]),
                start_date=r["start_date"],
                end_date=r["end_date"],
                expected_hours=as_decimal(r["expected_hours"]) if r.get("expected_hours") is not None else None,
                period_name=r.get("period_name"),
            )

    def get_record(self, payroll_period_id: int, employee_id: int, *, for_update: bool = False) -> Optional[PayrollRecord]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM payroll_records
                WHERE payroll_period_id=%s AND employee_id=%s{lock}
                """,
                (int(payroll_period_id), int(employee_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def save_draft(
        self,
        *,
        payroll_period_id: int,
        employee_id: int,
        base_salary: Decimal,
        inputs: PayrollInputs,
        amounts: PayrollAmounts,
    ) -> PayrollRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    payroll_period_id, employee_id, base_salary, hourly_rate,
                    total_worked_hours, total_regular_hours, total_overtime_hours, total_late_hours,
                    late_deductions, gross_pay, net_pay, total_deductions, total_benefits, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'draft') AS new
                ON DUPLICATE KEY UPDATE
                    base_salary=new.base_salary,
                    hourly_rate=new.hourly_rate,
                    total_worked_hours=new.total_worked_hours,
                    total_regular_hours=new.total_regular_hours,
                    total_overtime_hours=new.total_overtime_hours,
                    total_late_hours=new.total_late_hours,
                    late_deductions=new.late_deductions,
                    gross_pay=new.gross_pay,
                    net_pay=new.net_pay,
                    total_deductions=new.total_deductions,
                    total_benefits=new.total_benefits
                """,
                (
                    int(payroll_period_id),
                    int(employee_id),
                    base_salary,
                    amounts.hourly_rate,
                    inputs.total_worked_hours,
                    inputs.total_regular_hours,
                    inputs.total_overtime_hours,
                    inputs.total_late_hours,
                    amounts.late_deductions,
                    amounts.gross_pay,
                    amounts.net_pay,
                    amounts.total_deductions,
                    amounts.total_benefits,
                ),
            )
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM payroll_records
                WHERE payroll_period_id=%s AND employee_id=%s
                """,
                (int(payroll_period_id), int(employee_id)),
            )
            return _to_record(fetchone(cur))
