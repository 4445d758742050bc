from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import round_hours
from ..common.reports import RequestStats, ValidationReport
from ..common.time_of_day import TimeLike, TimeOfDay, intervals_overlap
from ..core.constants import DEFAULT_LIST_LIMIT, MIN_REASON_LENGTH, OVERTIME_HOURS_TOLERANCE
from ..core.enums import RequestStatus, SessionType
from ..core.exceptions import (
    AlreadyProcessed,
    CannotDeleteProcessed,
    DomainError,
    HoursMismatch,
    InvalidTimeRange,
    NonPositiveHours,
    OverlappingRequest,
    PastDateNotAllowed,
    RequestNotFound,
    ValidationError,
)
from ..database.connection import TransactionManager
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .accrual.base import LeaveAccrualPolicy
from .accrual.no_accrual import NoAccrual
from .model import OvertimeRequest
from .repository import OvertimeRequestRepository

logger = logging.getLogger(__name__)


def _as_hours(value) -> Decimal:
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid requested hours: {value!r}")
    if not hours.is_finite():
        raise ValidationError(f"Invalid requested hours: {value!r}")
    return hours


def _hours_mismatch(start: TimeOfDay, end: TimeOfDay, requested: Decimal) -> bool:
    # Compare in seconds to keep 0.1h exact.
    diff_seconds = abs(Decimal(end.to_seconds() - start.to_seconds()) - requested * 3600)
    return diff_seconds > Decimal(str(OVERTIME_HOURS_TOLERANCE)) * 3600


class OvertimeService:
    """Overtime requests: pending -> approved | rejected."""

    def __init__(
        self,
        requests: OvertimeRequestRepository,
        employees: EmployeeDirectory,
        attendance: AttendanceService,
        transactions: TransactionManager,
        *,
        accrual: Optional[LeaveAccrualPolicy] = None,
    ):
        self._requests = requests
        self._employees = employees
        self._attendance = attendance
        self._transactions = transactions
        self._accrual = accrual or NoAccrual()

    @property
    def accrual(self) -> LeaveAccrualPolicy:
        return self._accrual

    def create(
        self,
        employee_id: int,
        request_date: date,
        start_time: TimeLike,
        end_time: TimeLike,
        requested_hours,
        reason: str,
        *,
        now: datetime | None = None,
    ) -> OvertimeRequest:
        now = now or datetime.now()
        require_active_employee(self._employees, employee_id)

        if request_date < now.date():
            raise PastDateNotAllowed("Cannot request overtime for past dates")

        start = TimeOfDay.parse(start_time)
        end = TimeOfDay.parse(end_time)
        if start >= end:
            raise InvalidTimeRange("Start time must be before end time")

        hours = _as_hours(requested_hours)
        if _hours_mismatch(start, end, hours):
            raise HoursMismatch(
                f"Requested hours {hours} do not match the time range {start}-{end} ({round_hours(start.hours_until(end))}h)"
            )
        if hours <= 0:
            raise NonPositiveHours("Requested hours must be greater than 0")

        with self._transactions.transaction():
            for other in self._requests.list_pending_for_day(int(employee_id), request_date):
                if intervals_overlap(start, end, other.start_time, other.end_time):
                    raise OverlappingRequest(
                        f"An overtime request already exists for this time period (request {other.request_id})"
                    )
            created = self._requests.create(
                employee_id=int(employee_id),
                request_date=request_date,
                start_time=start,
                end_time=end,
                requested_hours=hours,
                reason=(reason or "").strip(),
            )

        logger.info(
            "overtime request %s created: employee=%s date=%s %s-%s (%sh)",
            created.request_id, employee_id, request_date, start, end, hours,
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
    ) -> OvertimeRequest:
        """Decide a pending request; approval adds the overtime session and runs the accrual rule."""

        now = now or datetime.now()
        status = RequestStatus.APPROVED if approved else RequestStatus.REJECTED

        with self._transactions.transaction():
            req = self._requests.get(int(request_id))
            if not req:
                raise RequestNotFound(f"Overtime request {request_id} not found")
            if not req.is_pending:
                raise AlreadyProcessed(f"Overtime request {request_id} has already been processed")

            decided = self._requests.decide(
                request_id=req.request_id,
                status=status,
                approved_by=int(approver_id),
                approved_at=now,
                comments=(comments or "").strip() or None,
            )
            if not decided:
                raise AlreadyProcessed(f"Overtime request {request_id} has already been processed")

            if approved:
                start_at, end_at = req.window()
                record = self._attendance.get_or_create_record(req.employee_id, req.request_date)
                self._attendance.append_session(record.record_id, SessionType.OVERTIME, start_at, clock_out=end_at)
                self._accrual.accrue(req)

        logger.info("overtime request %s %s by %s", request_id, status.value, approver_id)
        return self._requests.get(int(request_id)) or req

    def delete(self, request_id: int) -> None:
        req = self._requests.get(int(request_id))
        if not req:
            raise RequestNotFound(f"Overtime request {request_id} not found")
        if not req.is_pending or not self._requests.delete_pending(req.request_id):
            raise CannotDeleteProcessed("Cannot delete processed requests")
        logger.info("overtime request %s deleted", request_id)

    def get(self, request_id: int) -> OvertimeRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise RequestNotFound(f"Overtime request {request_id} not found")
        return req

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[OvertimeRequest]:
        return self._requests.list_for_employee(
            int(employee_id),
            status=RequestStatus(status) if status else None,
            start_date=start_date,
            end_date=end_date,
            limit=int(limit),
        )

    def stats(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> RequestStats:
        rows = self._requests.list_for_employee(
            int(employee_id), start_date=start_date, end_date=end_date, limit=None
        )
        by_status = {s: [r for r in rows if r.status == s] for s in RequestStatus}
        return RequestStats(
            total_requests=len(rows),
            pending_requests=len(by_status[RequestStatus.PENDING]),
            approved_requests=len(by_status[RequestStatus.APPROVED]),
            rejected_requests=len(by_status[RequestStatus.REJECTED]),
            total_hours=round_hours(float(sum((r.requested_hours for r in rows), Decimal("0")))),
            approved_hours=round_hours(
                float(sum((r.requested_hours for r in by_status[RequestStatus.APPROVED]), Decimal("0")))
            ),
        )

    def validate(
        self,
        employee_id: int,
        request_date: date,
        start_time: TimeLike,
        end_time: TimeLike,
        requested_hours,
        reason: str,
        *,
        now: datetime | None = None,
    ) -> ValidationReport:
        """Run every create() check and collect the messages instead of raising."""

        now = now or datetime.now()
        errors: list[str] = []

        employee_ok = True
        try:
            require_active_employee(self._employees, employee_id)
        except DomainError as exc:
            employee_ok = False
            errors.append(str(exc))

        if request_date < now.date():
            errors.append("Cannot request overtime for past dates")

        try:
            start = TimeOfDay.parse(start_time)
            end = TimeOfDay.parse(end_time)
            hours = _as_hours(requested_hours)
        except ValidationError as exc:
            errors.append(str(exc))
            return ValidationReport(errors=errors)

        if start >= end:
            errors.append("Start time must be before end time")
        if _hours_mismatch(start, end, hours):
            errors.append("Requested hours do not match the time range")
        if hours <= 0:
            errors.append("Requested hours must be greater than 0")
        if not reason or len(reason.strip()) < MIN_REASON_LENGTH:
            errors.append(f"Reason must be at least {MIN_REASON_LENGTH} characters long")

        if employee_ok and start < end:
            for other in self._requests.list_for_employee(
                int(employee_id), status=RequestStatus.PENDING, start_date=request_date, end_date=request_date
            ):
                if intervals_overlap(start, end, other.start_time, other.end_time):
                    errors.append("An overtime request already exists for this time period")
                    break

        return ValidationReport(errors=errors)
