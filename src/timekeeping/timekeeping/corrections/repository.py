from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus, SessionType
from .model import TimeCorrectionRequest


class TimeCorrectionRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        request_date: date,
        session_type: SessionType,
        requested_time: TimeOfDay,
        reason: str,
    ) -> TimeCorrectionRequest:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[TimeCorrectionRequest]:
        raise NotImplementedError

    def find_pending(
        self, employee_id: int, request_date: date, session_type: SessionType
    ) -> Optional[TimeCorrectionRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[TimeCorrectionRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approved_by: int,
        approved_at: datetime,
        comments: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status='pending'."""

        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError
