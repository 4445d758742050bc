from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ...common.datetime_utils import hours_between, round_hours
from ...common.time_of_day import TimeOfDay
from ...core.constants import (
    DEFAULT_AFTERNOON_START,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_MORNING_END,
    DEFAULT_MORNING_START,
)
from ...core.enums import SessionType
from ..model import AttendanceSession, DailyHours
from .base import HoursCalculator

_HALF_DAYS = (
    (SessionType.MORNING_IN, SessionType.MORNING_OUT),
    (SessionType.AFTERNOON_IN, SessionType.AFTERNOON_OUT),
)


@dataclass(frozen=True)
class ShiftWindows:
    """Official half-day starts used to measure lateness.

    ``morning_end`` splits the day for clock-event guidance.
    """

    morning_start: TimeOfDay = field(default_factory=lambda: TimeOfDay.parse(DEFAULT_MORNING_START))
    afternoon_start: TimeOfDay = field(default_factory=lambda: TimeOfDay.parse(DEFAULT_AFTERNOON_START))
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    morning_end: TimeOfDay = field(default_factory=lambda: TimeOfDay.parse(DEFAULT_MORNING_END))

    def start_for(self, in_type: SessionType) -> TimeOfDay:
        if in_type == SessionType.MORNING_IN:
            return self.morning_start
        return self.afternoon_start


def _sort_key(session: AttendanceSession) -> tuple[datetime, int]:
    return (session.effective_time or datetime.min, session.session_id)


class SessionTypedHoursCalculator(HoursCalculator):
    """Sum typed half-day pairs and overtime windows.

    morning_in/morning_out and afternoon_in/afternoon_out are paired by type,
    no search. Each pair yields max(0, out - in) regular hours; overtime
    windows yield max(0, clock_out - clock_in) overtime hours. Anything that
    cannot be paired contributes 0 hours and is reported in ``unmatched``.
    """

    def __init__(self, windows: Optional[ShiftWindows] = None):
        self._windows = windows or ShiftWindows()

    @property
    def windows(self) -> ShiftWindows:
        return self._windows

    def calculate(self, sessions: Iterable[AttendanceSession]) -> DailyHours:
        ordered = sorted(sessions, key=_sort_key)
        by_type: dict[SessionType, list[AttendanceSession]] = defaultdict(list)
        for s in ordered:
            by_type[s.session_type].append(s)

        session_hours = {s.session_id: 0.0 for s in ordered}
        unmatched: list[int] = []
        regular = 0.0
        late = 0.0

        for in_type, out_type in _HALF_DAYS:
            ins = [s for s in by_type.get(in_type, []) if s.clock_in is not None]
            outs = [s for s in by_type.get(out_type, []) if s.clock_out is not None]
            unmatched.extend(s.session_id for s in by_type.get(in_type, []) if s.clock_in is None)
            unmatched.extend(s.session_id for s in by_type.get(out_type, []) if s.clock_out is None)

            # Earliest in, latest out; duplicates for the same slot are left unmatched.
            first_in = ins[0] if ins else None
            last_out = outs[-1] if outs else None
            unmatched.extend(s.session_id for s in ins[1:])
            unmatched.extend(s.session_id for s in outs[:-1])

            if first_in is not None:
                late += self._late_hours(in_type, first_in.clock_in)

            if first_in is None or last_out is None:
                # Unpaired half-day: lenient degrade to 0 hours.
                for lone in (first_in, last_out):
                    if lone is not None:
                        unmatched.append(lone.session_id)
                continue

            hours = round_hours(max(0.0, hours_between(first_in.clock_in, last_out.clock_out)))
            session_hours[last_out.session_id] = hours
            regular += hours

        overtime = 0.0
        for s in by_type.get(SessionType.OVERTIME, []):
            if s.clock_in is None or s.clock_out is None:
                unmatched.append(s.session_id)
                continue
            hours = round_hours(max(0.0, hours_between(s.clock_in, s.clock_out)))
            session_hours[s.session_id] = hours
            overtime += hours

        regular = round_hours(regular)
        overtime = round_hours(overtime)
        return DailyHours(
            total_hours=round_hours(regular + overtime),
            regular_hours=regular,
            overtime_hours=overtime,
            late_hours=round_hours(late),
            session_hours=session_hours,
            unmatched=tuple(sorted(set(unmatched))),
        )

    def _late_hours(self, in_type: SessionType, clock_in: datetime) -> float:
        start = self._windows.start_for(in_type).on(clock_in.date())
        if clock_in <= start + timedelta(minutes=self._windows.grace_minutes):
            return 0.0
        return hours_between(start, clock_in)
