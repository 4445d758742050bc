from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import OverallStatus, SessionType
from .model import AttendanceRecord, AttendanceSession


class AttendanceRepository(Protocol):
    # Records
    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(
        self, employee_id: int, work_date: date, *, for_update: bool = False
    ) -> Optional[AttendanceRecord]:
        """Look up the day's record; for_update takes a locking read inside a transaction."""

        raise NotImplementedError

    def create_record(self, *, employee_id: int, work_date: date, overall_status: OverallStatus) -> AttendanceRecord:
        """Insert a record; raises ConflictError if (employee_id, work_date) already exists."""

        raise NotImplementedError

    def lock_record(self, record_id: int) -> None:
        """Row-lock the record for the rest of the current transaction."""

        raise NotImplementedError

    def update_status(self, *, record_id: int, overall_status: OverallStatus) -> bool:
        raise NotImplementedError

    def list_records(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    # Sessions
    def get_session(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_sessions(self, record_id: int, *, for_update: bool = False) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_sessions_for_records(self, record_ids: Sequence[int]) -> Mapping[int, Sequence[AttendanceSession]]:
        raise NotImplementedError

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
        """Insert a session; raises ConflictError if the in/out slot is taken."""

        raise NotImplementedError

    def update_session_times(
        self,
        *,
        session_id: int,
        clock_in: Optional[datetime],
        clock_out: Optional[datetime],
    ) -> bool:
        raise NotImplementedError

    def update_calculated_hours(self, hours_by_session: Mapping[int, float]) -> None:
        raise NotImplementedError

    def latest_session_for_day(self, employee_id: int, work_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError
