from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import OvertimeRequest
from .repository import OvertimeRequestRepository

_COLUMNS = (
    "request_id, employee_id, request_date, start_time, end_time, requested_hours, reason, "
    "status, approved_by, approved_at, comments, created_at"
)


def _to_request(r: dict) -> OvertimeRequest:
    return OvertimeRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        request_date=r["request_date"],
        start_time=TimeOfDay.parse(r["start_time"]),
        end_time=TimeOfDay.parse(r["end_time"]),
        requested_hours=as_decimal(r["requested_hours"]),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=r.get("approved_at"),
        comments=r.get("comments"),
        created_at=r.get("created_at"),
    )


class MySQLOvertimeRequestRepository(OvertimeRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        request_date: date,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        requested_hours: Decimal,
        reason: str,
    ) -> OvertimeRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_requests(
                    employee_id, request_date, start_time, end_time, requested_hours, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,'pending')
                """,
                (int(employee_id), request_date, str(start_time), str(end_time), requested_hours, reason),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_requests WHERE request_id=%s", (request_id,))
            return _to_request(fetchone(cur))

    def get(self, request_id: int) -> Optional[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_pending_for_day(self, employee_id: int, request_date: date) -> Sequence[OvertimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            # FOR UPDATE: serialize concurrent creates for the same employee-day.
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_requests
                WHERE employee_id=%s AND request_date=%s AND status='pending'
                ORDER BY start_time ASC
                FOR UPDATE
                """,
                (int(employee_id), request_date),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[OvertimeRequest]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if start_date is not None:
            clauses.append("request_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("request_date <= %s")
            params.append(end_date)
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                {limit_sql}
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approved_by: int,
        approved_at: datetime,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_requests
                SET status=%s, approved_by=%s, approved_at=%s, comments=%s
                WHERE request_id=%s AND status='pending'
                """,
                (status.value, int(approved_by), approved_at, comments, int(request_id)),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM overtime_requests WHERE request_id=%s AND status='pending'",
                (int(request_id),),
            )
            return cur.rowcount > 0
