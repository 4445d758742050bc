from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import (
    AlreadyProcessed,
    CannotDeleteProcessed,
    InsufficientLeaveBalance,
    InvalidTimeRange,
    OverlappingRequest,
    PastDateNotAllowed,
    RequestNotFound,
    ValidationError,
)
from ..database.connection import TransactionManager
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .model import LeaveRequest
from .repository import LeaveRequestRepository
from .service import LeaveBalanceService

logger = logging.getLogger(__name__)


def working_days(start_date: date, end_date: date) -> int:
    """Monday to Friday dates in the inclusive range."""

    count = 0
    day = start_date
    while day <= end_date:
        if day.weekday() < 5:
            count += 1
        day += timedelta(days=1)
    return count


class LeaveRequestService:
    """Leave requests: pending -> approved | rejected; approval spends the balance."""

    def __init__(
        self,
        requests: LeaveRequestRepository,
        employees: EmployeeDirectory,
        ledger: LeaveBalanceService,
        transactions: TransactionManager,
    ):
        self._requests = requests
        self._employees = employees
        self._ledger = ledger
        self._transactions = transactions

    def create(
        self,
        employee_id: int,
        leave_type: LeaveType | str,
        start_date: date,
        end_date: date,
        reason: str = "",
        *,
        now: datetime | None = None,
    ) -> LeaveRequest:
        now = now or datetime.now()
        require_active_employee(self._employees, employee_id)
        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {leave_type!r}")

        if end_date < start_date:
            raise InvalidTimeRange("start_date must be on or before end_date")
        if start_date < now.date():
            raise PastDateNotAllowed("Cannot request leave for past dates")

        total_days = Decimal(working_days(start_date, end_date))
        if total_days <= 0:
            raise ValidationError("Leave period must include at least one working day")

        available = self._ledger.get_balance(employee_id, leave_type)
        if available < total_days:
            raise InsufficientLeaveBalance(
                f"Insufficient leave balance. Available: {available} days, Requested: {total_days} days"
            )
        if self._requests.list_approved_overlapping(int(employee_id), start_date, end_date):
            raise OverlappingRequest("Leave request overlaps with existing approved leave")

        created = self._requests.create(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=(reason or "").strip(),
        )
        logger.info(
            "leave request %s created: employee=%s %s %s..%s (%s days)",
            created.request_id, employee_id, leave_type.value, start_date, end_date, total_days,
        )
        return created

    def approve(
        self,
        request_id: int,
        approver_id: int,
        approved: bool,
        comments: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> LeaveRequest:
        """Decide a pending request; approval consumes the days or rolls the decision back."""

        now = now or datetime.now()
        status = RequestStatus.APPROVED if approved else RequestStatus.REJECTED

        with self._transactions.transaction():
            req = self._requests.get(int(request_id))
            if not req:
                raise RequestNotFound(f"Leave request {request_id} not found")
            if not req.is_pending:
                raise AlreadyProcessed(f"Leave request {request_id} has already been processed")

            decided = self._requests.decide(
                request_id=req.request_id,
                status=status,
                approved_by=int(approver_id),
                approved_at=now,
                comments=(comments or "").strip() or None,
            )
            if not decided:
                raise AlreadyProcessed(f"Leave request {request_id} has already been processed")

            if approved:
                balance = self._ledger.use_leave_days(req.employee_id, req.leave_type, req.total_days, clamp=False)
                if balance is None:
                    raise InsufficientLeaveBalance(
                        f"Insufficient {req.leave_type.value} balance for {req.total_days} days"
                    )

        logger.info("leave request %s %s by %s", request_id, status.value, approver_id)
        return self._requests.get(int(request_id)) or req

    def delete(self, request_id: int) -> None:
        req = self.get(request_id)
        if not req.is_pending or not self._requests.delete_pending(req.request_id):
            raise CannotDeleteProcessed("Cannot delete processed requests")
        logger.info("leave request %s deleted", request_id)

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise RequestNotFound(f"Leave request {request_id} not found")
        return req

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus | str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        return self._requests.list_for_employee(
            int(employee_id),
            status=RequestStatus(status) if status else None,
            limit=int(limit),
        )
