from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class OvertimeRequest:
    """Employee ask for pre-approved extra hours on one date.

    ``start_time``/``end_time`` are wall-clock times on ``request_date``.
    """

    request_id: int
    employee_id: int
    request_date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    requested_hours: Decimal
    reason: str
    status: RequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING

    def window(self) -> tuple[datetime, datetime]:
        return self.start_time.on(self.request_date), self.end_time.on(self.request_date)
