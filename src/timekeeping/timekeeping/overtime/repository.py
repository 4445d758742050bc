from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..common.time_of_day import TimeOfDay
from ..core.enums import RequestStatus
from .model import OvertimeRequest


class OvertimeRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        request_date: date,
        start_time: TimeOfDay,
        end_time: TimeOfDay,
        requested_hours: Decimal,
        reason: str,
    ) -> OvertimeRequest:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[OvertimeRequest]:
        raise NotImplementedError

    def list_pending_for_day(self, employee_id: int, request_date: date) -> Sequence[OvertimeRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[OvertimeRequest]:
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
        """Compare-and-set: only flips a request that is still pending."""

        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError
