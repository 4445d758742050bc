from __future__ import annotations

from typing import Iterable, Optional

from ..common.time_of_day import TimeOfDay
from ..core.enums import DayState, SessionType
from .calculator.session_calculator import ShiftWindows
from .model import AttendanceRecord, AttendanceSession

# Out slot -> the in slot it closes.
PAIRED_IN = {
    SessionType.MORNING_OUT: SessionType.MORNING_IN,
    SessionType.AFTERNOON_OUT: SessionType.AFTERNOON_IN,
}


def day_state(record: Optional[AttendanceRecord], latest: Optional[AttendanceSession]) -> DayState:
    """no_record -> open (last action is an in) <-> balanced (last action closed a window)."""

    if record is None:
        return DayState.NO_RECORD
    if latest is not None and latest.session_type.is_in:
        return DayState.OPEN
    return DayState.BALANCED


def next_session_type(
    sessions: Iterable[AttendanceSession],
    at: TimeOfDay,
    windows: Optional[ShiftWindows] = None,
) -> Optional[SessionType]:
    """Next in/out slot an employee is expected to clock at ``at``.

    Before the end of the morning the morning pair comes first; after it, an
    open morning is closed before the afternoon pair starts. Returns None once
    the day's slots are used up; overtime is only added through approved
    overtime requests.
    """

    windows = windows or ShiftWindows()
    recorded = {s.session_type for s in sessions}

    if at < windows.morning_end:
        if SessionType.MORNING_IN not in recorded:
            return SessionType.MORNING_IN
        if SessionType.MORNING_OUT not in recorded:
            return SessionType.MORNING_OUT
    elif SessionType.MORNING_IN in recorded and SessionType.MORNING_OUT not in recorded:
        return SessionType.MORNING_OUT

    if SessionType.AFTERNOON_IN not in recorded:
        return SessionType.AFTERNOON_IN
    if SessionType.AFTERNOON_OUT not in recorded:
        return SessionType.AFTERNOON_OUT
    return None


def check_slot_available(session_type: SessionType, recorded: Iterable[SessionType]) -> Optional[str]:
    """Reason the slot cannot be clocked now, or None."""

    recorded = set(recorded)
    if not session_type.is_slot:
        return "Overtime sessions are created by approved overtime requests"
    if session_type in recorded:
        return f"Session {session_type.value} already recorded for this day"
    paired_in = PAIRED_IN.get(session_type)
    if paired_in is not None and paired_in not in recorded:
        return f"Cannot record {session_type.value} before {paired_in.value}"
    return None
