from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import OverallStatus, SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_duplicate_key
from .model import AttendanceRecord, AttendanceSession
from .repository import AttendanceRepository

_RECORD_COLUMNS = "record_id, employee_id, work_date, overall_status, created_at, updated_at"
_SESSION_COLUMNS = (
    "session_id, record_id, session_type, clock_in, clock_out, "
    "selfie_image_path, qr_code_hash, calculated_hours, created_at"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        overall_status=OverallStatus(r["overall_status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        record_id=int(r["record_id"]),
        session_type=SessionType(r["session_type"]),
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        selfie_image_path=r.get("selfie_image_path"),
        qr_code_hash=r.get("qr_code_hash"),
        calculated_hours=float(r.get("calculated_hours") or 0),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Records --------
    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE record_id=%s",
                (int(record_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(
        self, employee_id: int, work_date: date, *, for_update: bool = False
    ) -> Optional[AttendanceRecord]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s{lock}
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(self, *, employee_id: int, work_date: date, overall_status: OverallStatus) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            with translate_duplicate_key("Attendance record already exists for this day"):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, overall_status)
                    VALUES(%s,%s,%s)
                    """,
                    (int(employee_id), work_date, overall_status.value),
                )
            record_id = int(cur.lastrowid)
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE record_id=%s",
                (record_id,),
            )
            return _to_record(fetchone(cur))

    def lock_record(self, record_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT record_id FROM attendance_records WHERE record_id=%s FOR UPDATE",
                (int(record_id),),
            )
            fetchall(cur)

    def update_status(self, *, record_id: int, overall_status: OverallStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET overall_status=%s
                WHERE record_id=%s
                """,
                (overall_status.value, int(record_id)),
            )
            return cur.rowcount > 0

    def list_records(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    # -------- Sessions --------
    def get_session(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s",
                (int(session_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_sessions(self, record_id: int, *, for_update: bool = False) -> Sequence[AttendanceSession]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions
                WHERE record_id=%s
                ORDER BY COALESCE(clock_in, clock_out) ASC, session_id ASC{lock}
                """,
                (int(record_id),),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_sessions_for_records(self, record_ids: Sequence[int]) -> Mapping[int, Sequence[AttendanceSession]]:
        out: dict[int, list[AttendanceSession]] = {int(rid): [] for rid in record_ids}
        if not out:
            return out

        placeholders = ",".join(["%s"] * len(out))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions
                WHERE record_id IN ({placeholders})
                ORDER BY record_id ASC, COALESCE(clock_in, clock_out) ASC, session_id ASC
                """,
                tuple(out.keys()),
            )
            for r in fetchall(cur):
                session = _to_session(r)
                out[session.record_id].append(session)
        return out

    def create_session(
        self,
        *,
        record_id: int,
        session_type: SessionType,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
        selfie_image_path: Optional[str] = None,
        qr_code_hash: Optional[str] = None,
    ) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            with translate_duplicate_key(f"Session {session_type.value} already recorded for this day"):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(
                        record_id, session_type, clock_in, clock_out, selfie_image_path, qr_code_hash
                    )
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(record_id), session_type.value, clock_in, clock_out, selfie_image_path, qr_code_hash),
                )
            session_id = int(cur.lastrowid)
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE session_id=%s",
                (session_id,),
            )
            return _to_session(fetchone(cur))

    def update_session_times(
        self,
        *,
        session_id: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET clock_in=%s, clock_out=%s
                WHERE session_id=%s
                """,
                (clock_in, clock_out, int(session_id)),
            )
            return cur.rowcount > 0

    def update_calculated_hours(self, hours_by_session: Mapping[int, float]) -> None:
        if not hours_by_session:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "UPDATE attendance_sessions SET calculated_hours=%s WHERE session_id=%s",
                [(max(0.0, float(hours)), int(sid)) for sid, hours in hours_by_session.items()],
            )

    def latest_session_for_day(self, employee_id: int, work_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {', '.join('s.' + c.strip() for c in _SESSION_COLUMNS.split(','))}
                FROM attendance_sessions s
                JOIN attendance_records ar ON ar.record_id = s.record_id
                WHERE ar.employee_id=%s AND ar.work_date=%s
                ORDER BY COALESCE(s.clock_out, s.clock_in) DESC, s.session_id DESC
                LIMIT 1
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None
