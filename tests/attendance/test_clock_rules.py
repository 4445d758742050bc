from __future__ import annotations

from datetime import date, datetime

from src.timekeeping.timekeeping.attendance.clock_rules import check_slot_available, day_state, next_session_type
from src.timekeeping.timekeeping.attendance.model import AttendanceRecord, AttendanceSession
from src.timekeeping.timekeeping.common.time_of_day import TimeOfDay
from src.timekeeping.timekeeping.core.enums import DayState, OverallStatus, SessionType


def sessions_of(*types: SessionType) -> list[AttendanceSession]:
    return [
        AttendanceSession(session_id=i, record_id=1, session_type=t, clock_in=datetime(2026, 3, 2, 8, i))
        for i, t in enumerate(types, start=1)
    ]


def test_morning_pair_comes_first_before_noon():
    assert next_session_type([], TimeOfDay(7, 55)) == SessionType.MORNING_IN
    assert next_session_type(sessions_of(SessionType.MORNING_IN), TimeOfDay(11, 0)) == SessionType.MORNING_OUT


def test_afternoon_without_morning_starts_afternoon_pair():
    assert next_session_type([], TimeOfDay(13, 0)) == SessionType.AFTERNOON_IN


def test_open_morning_is_closed_after_noon():
    assert next_session_type(sessions_of(SessionType.MORNING_IN), TimeOfDay(12, 30)) == SessionType.MORNING_OUT


def test_full_day_has_no_next_slot():
    done = sessions_of(
        SessionType.MORNING_IN, SessionType.MORNING_OUT, SessionType.AFTERNOON_IN, SessionType.AFTERNOON_OUT
    )
    assert next_session_type(done, TimeOfDay(18, 0)) is None


def test_slot_checks():
    assert check_slot_available(SessionType.MORNING_IN, []) is None
    assert "already recorded" in check_slot_available(SessionType.MORNING_IN, [SessionType.MORNING_IN])
    assert "before morning_in" in check_slot_available(SessionType.MORNING_OUT, [])
    assert check_slot_available(SessionType.OVERTIME, []) is not None


def test_day_state_transitions():
    record = AttendanceRecord(record_id=1, employee_id=1, work_date=date(2026, 3, 2), overall_status=OverallStatus.ABSENT)
    opened = sessions_of(SessionType.MORNING_IN)
    closed = sessions_of(SessionType.MORNING_IN, SessionType.MORNING_OUT)

    assert day_state(None, None) == DayState.NO_RECORD
    assert day_state(record, None) == DayState.BALANCED
    assert day_state(record, opened[-1]) == DayState.OPEN
    assert day_state(record, closed[-1]) == DayState.BALANCED
