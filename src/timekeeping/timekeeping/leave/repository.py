from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveAccrual, LeaveBalance, LeaveBalanceUpdate, LeaveRequest


class LeaveBalanceRepository(Protocol):
    def get(self, employee_id: int, leave_type: LeaveType) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def add_days(self, *, employee_id: int, leave_type: LeaveType, days: Decimal) -> LeaveBalance:
        """Atomic upsert-increment: create with ``days`` or add to the stored balance."""

        raise NotImplementedError

    def consume_days(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        days: Decimal,
        clamp: bool,
    ) -> Optional[LeaveBalance]:
        """Single-statement ``balance = max(0, balance - days)``.

        Without ``clamp`` the row is only touched when ``balance >= days``;
        returns None when nothing was consumed.
        """

        raise NotImplementedError

    def upsert_many(self, updates: Iterable[LeaveBalanceUpdate]) -> int:
        raise NotImplementedError


class LeaveAccrualRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        overtime_request_id: int,
        overtime_hours: Decimal,
        leave_days: Decimal,
        leave_type: LeaveType,
    ) -> LeaveAccrual:
        """Insert the audit row; raises ConflictError if the request already accrued."""

        raise NotImplementedError

    def get_for_overtime_request(self, overtime_request_id: int) -> Optional[LeaveAccrual]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveAccrual]:
        raise NotImplementedError


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: Decimal,
        reason: str,
    ) -> LeaveRequest:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
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
