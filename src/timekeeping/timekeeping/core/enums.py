from __future__ import annotations

from enum import Enum


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
    ON_LEAVE = "on_leave"


class OverallStatus(str, Enum):
    """Whole-day attendance status cached on the attendance record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    PARTIAL = "partial"


class SessionType(str, Enum):
    """Typed session slots within one attendance day."""

    MORNING_IN = "morning_in"
    MORNING_OUT = "morning_out"
    AFTERNOON_IN = "afternoon_in"
    AFTERNOON_OUT = "afternoon_out"
    OVERTIME = "overtime"

    @property
    def is_in(self) -> bool:
        return self in {SessionType.MORNING_IN, SessionType.AFTERNOON_IN}

    @property
    def is_out(self) -> bool:
        return self in {SessionType.MORNING_OUT, SessionType.AFTERNOON_OUT}

    @property
    def is_slot(self) -> bool:
        """In/out slots are unique per day; overtime windows are not."""
        return self is not SessionType.OVERTIME


class RequestStatus(str, Enum):
    """Approval state of overtime and time-correction requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    MATERNITY = "maternity"
    OTHER = "other"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    PROCESSED = "processed"
    PAID = "paid"


class DayState(str, Enum):
    """Clock state of one employee-day."""

    NO_RECORD = "no_record"
    OPEN = "open"
    BALANCED = "balanced"
