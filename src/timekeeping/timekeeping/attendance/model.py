from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayState, OverallStatus, SessionType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's one calendar day of attendance."""

    record_id: int
    employee_id: int
    work_date: date
    overall_status: OverallStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one typed clock event or in/out window within a day.

    ``*_in`` slots carry ``clock_in``, ``*_out`` slots carry ``clock_out``,
    ``overtime`` windows carry both.
    """

    session_id: int
    record_id: int
    session_type: SessionType
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    selfie_image_path: Optional[str] = None
    qr_code_hash: Optional[str] = None
    calculated_hours: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def effective_time(self) -> Optional[datetime]:
        """Latest timestamp on the session, used for ordering."""
        if self.clock_out is not None:
            return self.clock_out
        return self.clock_in


@dataclass(frozen=True)
class DailyHours:
    """Output of the hours calculator for one attendance day."""

    total_hours: float
    regular_hours: float
    overtime_hours: float
    late_hours: float
    # session_id -> hours credited to that session
    session_hours: dict[int, float] = field(default_factory=dict)
    # session ids that could not be paired (contributed 0 hours)
    unmatched: tuple[int, ...] = ()


@dataclass(frozen=True)
class DaySummary:
    """Read-model: a record with its sessions and computed hours."""

    employee_id: int
    work_date: date
    state: DayState
    overall_status: OverallStatus
    hours: DailyHours
    record: Optional[AttendanceRecord] = None
    sessions: tuple[AttendanceSession, ...] = ()
    next_session_type: Optional[SessionType] = None


@dataclass(frozen=True)
class AttendanceStats:
    """Date-range aggregate consumed by dashboards."""

    employee_id: int
    start_date: date
    end_date: date
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    partial_days: int
    total_hours: float
    regular_hours: float
    overtime_hours: float
    late_hours: float
    average_hours_per_day: float
