from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeCorrectionRequest
from .repository import TimeCorrectionRepository

_COLUMNS = (
    "request_id, employee_id, request_date, session_type, requested_time, reason, "
    "status, approved_by, approved_at, comments, created_at"
)


def _to_request(r: dict) -> TimeCorrectionRequest:
    return TimeCorrectionRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        request_date=r["request_date"],
        session_type=SessionType(r["session_type"]),
        requested_time=TimeOfDay.parse(r["requested_time"]),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=r.get("approved_at"),
        comments=r.get("comments"),
        created_at=r.get("created_at"),
    )


class MySQLTimeCorrectionRepository(TimeCorrectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        request_date: date,
        session_type: SessionType,
        requested_time: TimeOfDay,
        reason: str,
    ) -> TimeCorrectionRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_correction_requests(
                    employee_id, request_date, session_type, requested_time, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,'pending')
                """,
                (int(employee_id), request_date, session_type.value, str(requested_time), reason),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM time_correction_requests WHERE request_id=%s", (request_id,))
            return _to_request(fetchone(cur))

    def get(self, request_id: int) -> Optional[TimeCorrectionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_correction_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_pending(
        self, employee_id: int, request_date: date, session_type: SessionType
    ) -> Optional[TimeCorrectionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_correction_requests
                WHERE employee_id=%s AND request_date=%s AND session_type=%s AND status='pending'
                ORDER BY request_id ASC
                LIMIT 1
                FOR UPDATE
                """,
                (int(employee_id), request_date, session_type.value),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[TimeCorrectionRequest]:
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
                FROM time_correction_requests
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
                UPDATE time_correction_requests
                SET status=%s, approved_by=%s, approved_at=%s, comments=%s
                WHERE request_id=%s AND status='pending'
                """,
                (status.value, int(approved_by), approved_at, comments, int(request_id)),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_correction_requests WHERE request_id=%s AND status='pending'",
                (int(request_id),),
            )
            return cur.rowcount > 0
