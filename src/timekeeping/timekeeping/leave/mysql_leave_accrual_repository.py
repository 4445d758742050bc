from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, translate_duplicate_key
from .model import LeaveAccrual
from .repository import LeaveAccrualRepository

_COLUMNS = "accrual_id, employee_id, overtime_request_id, overtime_hours, leave_days, leave_type, created_at"


def _to_accrual(r: dict) -> LeaveAccrual:
    return LeaveAccrual(
        accrual_id=int(r["accrual_id"]),
        employee_id=int(r["employee_id"]),
        overtime_request_id=int(r["overtime_request_id"]),
        overtime_hours=as_decimal(r["overtime_hours"]),
        leave_days=as_decimal(r["leave_days"]),
        leave_type=LeaveType(r["leave_type"]),
        created_at=r.get("created_at"),
    )


class MySQLLeaveAccrualRepository(LeaveAccrualRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        overtime_request_id: int,
        overtime_hours: Decimal,
        leave_days: Decimal,
        leave_type: LeaveType,
    ) -> LeaveAccrual:
        with db_cursor(self._conn_factory) as (_, cur):
            with translate_duplicate_key(f"Overtime request {overtime_request_id} has already accrued leave"):
                cur.execute(
                    """
                    INSERT INTO leave_accruals(employee_id, overtime_request_id, overtime_hours, leave_days, leave_type)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), int(overtime_request_id), overtime_hours, leave_days, leave_type.value),
                )
            accrual_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM leave_accruals WHERE accrual_id=%s", (accrual_id,))
            return _to_accrual(fetchone(cur))

    def get_for_overtime_request(self, overtime_request_id: int) -> Optional[LeaveAccrual]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_accruals WHERE overtime_request_id=%s",
                (int(overtime_request_id),),
            )
            r = fetchone(cur)
            return _to_accrual(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveAccrual]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if start_date is not None:
            clauses.append("DATE(created_at) >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("DATE(created_at) <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_accruals
                WHERE {where}
                ORDER BY created_at DESC, accrual_id DESC
                """,
                tuple(params),
            )
            return [_to_accrual(r) for r in fetchall(cur)]
