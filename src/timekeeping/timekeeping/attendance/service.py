from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import round_hours
from ..common.time_of_day import TimeOfDay
from ..core.enums import OverallStatus, SessionType
from ..core.exceptions import (
    ConflictError,
    RecordNotFound,
    SessionAlreadyRecorded,
    SessionNotFound,
    ValidationError,
)
from ..database.connection import TransactionManager
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .calculator.base import HoursCalculator, derive_status
from .calculator.session_calculator import SessionTypedHoursCalculator, ShiftWindows
from .clock_rules import check_slot_available, day_state, next_session_type
from .images import SelfieStorage, is_data_uri
from .model import AttendanceRecord, AttendanceSession, AttendanceStats, DailyHours, DaySummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _require_naive(value: Optional[datetime], name: str) -> None:
    if value is not None and value.tzinfo is not None:
        raise ValidationError(f"{name} must be a local date-time without a UTC offset")


class AttendanceService:
    """Attendance timeline: records, sessions and the status cached on them."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        transactions: TransactionManager,
        *,
        calculator: Optional[HoursCalculator] = None,
        selfie_storage: Optional[SelfieStorage] = None,
        windows: Optional[ShiftWindows] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._transactions = transactions
        self._windows = windows or ShiftWindows()
        self._calculator = calculator or SessionTypedHoursCalculator(self._windows)
        self._selfies = selfie_storage

    @property
    def calculator(self) -> HoursCalculator:
        return self._calculator

    # -------- Records --------
    def get_or_create_record(self, employee_id: int, work_date: date) -> AttendanceRecord:
        existing = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if existing:
            return existing
        try:
            return self._attendance.create_record(
                employee_id=int(employee_id),
                work_date=work_date,
                overall_status=OverallStatus.ABSENT,
            )
        except ConflictError:
            # Lost the insert race; the winner's row is the record. A locking read
            # sees it even from inside an older transaction snapshot.
            winner = self._attendance.get_for_employee_and_date(int(employee_id), work_date, for_update=True)
            if not winner:
                raise
            return winner

    def recompute_record(self, record_id: int) -> DailyHours:
        """Re-derive per-session hours and the record's cached overall status."""

        sessions = self._attendance.list_sessions(int(record_id), for_update=True)
        hours = self._calculator.calculate(sessions)
        self._attendance.update_calculated_hours(hours.session_hours)

        status = derive_status(hours.total_hours) if sessions else OverallStatus.ABSENT
        self._attendance.update_status(record_id=int(record_id), overall_status=status)
        if hours.unmatched:
            logger.info("record %s has unmatched sessions %s", record_id, list(hours.unmatched))
        return hours

    # -------- Sessions --------
    def append_session(
        self,
        record_id: int,
        session_type: SessionType,
        timestamp: datetime,
        *,
        clock_out: Optional[datetime] = None,
        selfie_data: Optional[str] = None,
        qr_code_hash: Optional[str] = None,
    ) -> AttendanceSession:
        _require_naive(timestamp, "timestamp")
        _require_naive(clock_out, "clock_out")
        session_type = SessionType(session_type)
        record = self._attendance.get_record(int(record_id))
        if not record:
            raise RecordNotFound(f"Attendance record {record_id} not found")

        if session_type == SessionType.OVERTIME:
            if clock_out is None:
                raise ValidationError("Overtime sessions need both clock-in and clock-out")
            clock_in_at, clock_out_at = timestamp, clock_out
        elif session_type.is_in:
            clock_in_at, clock_out_at = timestamp, None
        else:
            clock_in_at, clock_out_at = None, timestamp

        selfie_path = self._store_selfie(
            selfie_data,
            employee_id=record.employee_id,
            session_type=session_type,
            taken_at=timestamp,
        )

        with self._transactions.transaction():
            self._attendance.lock_record(record.record_id)
            if session_type.is_slot:
                taken = {s.session_type for s in self._attendance.list_sessions(record.record_id)}
                if session_type in taken:
                    raise SessionAlreadyRecorded(f"Session {session_type.value} already recorded for this day")
            try:
                session = self._attendance.create_session(
                    record_id=record.record_id,
                    session_type=session_type,
                    clock_in=clock_in_at,
                    clock_out=clock_out_at,
                    selfie_image_path=selfie_path,
                    qr_code_hash=qr_code_hash,
                )
            except ConflictError as exc:
                raise SessionAlreadyRecorded(str(exc)) from exc
            self.recompute_record(record.record_id)

        logger.info(
            "session %s appended: record=%s type=%s at=%s",
            session.session_id, record.record_id, session_type.value, timestamp,
        )
        return self._attendance.get_session(session.session_id) or session

    def update_session(self, session_id: int, new_timestamp: datetime) -> AttendanceSession:
        """Move the in or out component of a slot and recompute its record."""

        _require_naive(new_timestamp, "timestamp")
        session = self._attendance.get_session(int(session_id))
        if not session:
            raise SessionNotFound(f"Session {session_id} not found")
        if session.session_type == SessionType.OVERTIME:
            raise ValidationError("Overtime sessions cannot be moved by a single timestamp")

        clock_in, clock_out = session.clock_in, session.clock_out
        if session.session_type.is_in:
            clock_in = new_timestamp
        else:
            clock_out = new_timestamp

        with self._transactions.transaction():
            self._attendance.lock_record(session.record_id)
            self._attendance.update_session_times(session_id=session.session_id, clock_in=clock_in, clock_out=clock_out)
            self.recompute_record(session.record_id)

        logger.info("session %s moved to %s", session.session_id, new_timestamp)
        return self._attendance.get_session(session.session_id) or session

    def set_slot_time(self, record_id: int, session_type: SessionType, timestamp: datetime) -> AttendanceSession:
        """Update the slot's session if present, else create it."""

        session_type = SessionType(session_type)
        if not session_type.is_slot:
            raise ValidationError("Only in/out slots can be set to a single time")

        existing = [s for s in self._attendance.list_sessions(int(record_id)) if s.session_type == session_type]
        if existing:
            return self.update_session(existing[0].session_id, timestamp)
        return self.append_session(int(record_id), session_type, timestamp)

    def latest_session_for_day(self, employee_id: int, work_date: date) -> Optional[AttendanceSession]:
        return self._attendance.latest_session_for_day(int(employee_id), work_date)

    def _store_selfie(
        self,
        selfie_data: Optional[str],
        *,
        employee_id: int,
        session_type: SessionType,
        taken_at: datetime,
    ) -> Optional[str]:
        if not selfie_data:
            return None
        if not is_data_uri(selfie_data):
            # Already a stored reference.
            return selfie_data
        if self._selfies is None:
            logger.warning("selfie dropped for employee %s: no image storage configured", employee_id)
            return None
        try:
            return self._selfies.save(
                selfie_data,
                employee_id=employee_id,
                session_type=session_type.value,
                taken_at=taken_at,
            )
        except Exception:
            logger.exception("failed to store selfie for employee %s (%s)", employee_id, session_type.value)
            return None

    # -------- Clock events --------
    def record_clock_event(
        self,
        employee_id: int,
        *,
        session_type: Optional[SessionType] = None,
        now: datetime | None = None,
        selfie_data: Optional[str] = None,
        qr_code_hash: Optional[str] = None,
    ) -> DaySummary:
        now = now or datetime.now()
        _require_naive(now, "now")
        today = now.date()
        require_active_employee(self._employees, employee_id)

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        sessions = self._attendance.list_sessions(record.record_id) if record else []

        if session_type is None:
            session_type = next_session_type(sessions, TimeOfDay.of(now), self._windows)
            if session_type is None:
                raise ValidationError("All clock events for today are already recorded")
        session_type = SessionType(session_type)

        reason = check_slot_available(session_type, (s.session_type for s in sessions))
        if reason:
            if session_type.is_slot and session_type in {s.session_type for s in sessions}:
                raise SessionAlreadyRecorded(reason)
            raise ValidationError(reason)

        record = record or self.get_or_create_record(int(employee_id), today)
        self.append_session(
            record.record_id,
            session_type,
            now,
            selfie_data=selfie_data,
            qr_code_hash=qr_code_hash,
        )
        return self.get_day_summary(int(employee_id), today, now=now)

    # -------- Reads --------
    def get_day_summary(self, employee_id: int, work_date: date, *, now: datetime | None = None) -> DaySummary:
        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        sessions: Sequence[AttendanceSession] = self._attendance.list_sessions(record.record_id) if record else []
        return self._summarize(int(employee_id), work_date, record, sessions, now=now)

    def get_history(self, employee_id: int, *, start_date: date, end_date: date) -> list[DaySummary]:
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        records = self._attendance.list_records(employee_id=int(employee_id), start_date=start_date, end_date=end_date)
        sessions_by_record = self._attendance.list_sessions_for_records([r.record_id for r in records])
        return [
            self._summarize(int(employee_id), r.work_date, r, sessions_by_record.get(r.record_id, []))
            for r in records
        ]

    def daily_hours_between(
        self, employee_id: int, *, start_date: date, end_date: date
    ) -> list[tuple[AttendanceRecord, DailyHours]]:
        """Calculator output for every stored day in the range."""

        records = self._attendance.list_records(employee_id=int(employee_id), start_date=start_date, end_date=end_date)
        sessions_by_record = self._attendance.list_sessions_for_records([r.record_id for r in records])
        return [(r, self._calculator.calculate(sessions_by_record.get(r.record_id, []))) for r in records]

    def get_stats(self, employee_id: int, *, start_date: date, end_date: date) -> AttendanceStats:
        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        days = self.daily_hours_between(int(employee_id), start_date=start_date, end_date=end_date)
        counts = {status: 0 for status in OverallStatus}
        total = regular = overtime = late = 0.0
        for record, hours in days:
            counts[record.overall_status] += 1
            total += hours.total_hours
            regular += hours.regular_hours
            overtime += hours.overtime_hours
            late += hours.late_hours

        return AttendanceStats(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            total_days=len(days),
            present_days=counts[OverallStatus.PRESENT],
            late_days=counts[OverallStatus.LATE],
            absent_days=counts[OverallStatus.ABSENT],
            partial_days=counts[OverallStatus.PARTIAL],
            total_hours=round_hours(total),
            regular_hours=round_hours(regular),
            overtime_hours=round_hours(overtime),
            late_hours=round_hours(late),
            average_hours_per_day=round_hours(total / len(days)) if days else 0.0,
        )

    def _summarize(
        self,
        employee_id: int,
        work_date: date,
        record: Optional[AttendanceRecord],
        sessions: Sequence[AttendanceSession],
        *,
        now: datetime | None = None,
    ) -> DaySummary:
        ordered = tuple(sorted(sessions, key=lambda s: (s.effective_time or datetime.min, s.session_id)))
        hours = self._calculator.calculate(ordered)
        upcoming = None
        if now is not None and now.date() == work_date:
            upcoming = next_session_type(ordered, TimeOfDay.of(now), self._windows)

        return DaySummary(
            employee_id=employee_id,
            work_date=work_date,
            state=day_state(record, ordered[-1] if ordered else None),
            overall_status=record.overall_status if record else OverallStatus.ABSENT,
            hours=hours,
            record=record,
            sessions=ordered,
            next_session_type=upcoming,
        )
