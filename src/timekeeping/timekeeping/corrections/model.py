from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus, SessionType


@dataclass(frozen=True)
class TimeCorrectionRequest:
    """Employee ask to fix one in/out slot of a past day."""

    request_id: int
    employee_id: int
    request_date: date
    session_type: SessionType
    requested_time: TimeOfDay
    reason: str
    status: RequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    @property
    def requested_at(self) -> datetime:
        return self.requested_time.on(self.request_date)
