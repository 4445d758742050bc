from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...core.constants import FULL_DAY_HOURS, PARTIAL_DAY_HOURS
from ...core.enums import OverallStatus
from ..model import AttendanceSession, DailyHours


def derive_status(total_hours: float) -> OverallStatus:
    """Whole-day status from worked hours.

    A day without a record is ``absent`` and never reaches this function.
    """

    if total_hours < PARTIAL_DAY_HOURS:
        return OverallStatus.PARTIAL
    if total_hours < FULL_DAY_HOURS:
        return OverallStatus.LATE
    return OverallStatus.PRESENT


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for daily hours).

    Implementations must be pure functions of the session set.
    """

    @abstractmethod
    def calculate(self, sessions: Iterable[AttendanceSession]) -> DailyHours:
        raise NotImplementedError

    def status_for(self, sessions: Iterable[AttendanceSession]) -> OverallStatus:
        return derive_status(self.calculate(sessions).total_hours)
