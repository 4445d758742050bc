from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.reports import RequestStats, ValidationReport
from ..common.time_of_day import TimeLike, TimeOfDay
from ..core.constants import DEFAULT_LIST_LIMIT, MIN_REASON_LENGTH
from ..core.enums import RequestStatus, SessionType
from ..core.exceptions import (
    AlreadyProcessed,
    CannotDeleteProcessed,
    DomainError,
    DuplicatePendingRequest,
    FutureDateNotAllowed,
    RequestNotFound,
    ValidationError,
)
from ..database.connection import TransactionManager
from ..employees.repository import EmployeeDirectory
from ..employees.service import require_active_employee
from .model import TimeCorrectionRequest
from .repository import TimeCorrectionRepository

logger = logging.getLogger(__name__)


def _as_slot(value) -> SessionType:
    try:
        session_type = SessionType(value)
    except ValueError:
        raise ValidationError(f"Invalid session type: {value!r}")
    if not session_type.is_slot:
        raise ValidationError("Only morning/afternoon in/out sessions can be corrected")
    return session_type


class TimeCorrectionService:
    def __init__(
        self,
        requests: TimeCorrectionRepository,
        employees: EmployeeDirectory,
        attendance: AttendanceService,
        transactions: TransactionManager,
    ):
        self._requests = requests
        self._employees = employees
        self._attendance = attendance
        self._transactions = transactions

    def create(
        self,
        employee_id: int,
        request_date: date,
        session_type: SessionType | str,
        requested_time: TimeLike,
        reason: str,
        *,
        now: datetime | None = None,
    ) -> TimeCorrectionRequest:
        now = now or datetime.now()
        require_active_employee(self._employees, employee_id)

        if request_date > now.date():
            raise FutureDateNotAllowed("Cannot request correction for future dates")

        session_type = _as_slot(session_type)
        requested = TimeOfDay.parse(requested_time)

        with self._transactions.transaction():
            if self._requests.find_pending(int(employee_id), request_date, session_type):
                raise DuplicatePendingRequest(
                    "A pending time correction request already exists for this date and session type"
                )
            created = self._requests.create(
                employee_id=int(employee_id),
                request_date=request_date,
                session_type=session_type,
                requested_time=requested,
                reason=(reason or "").strip(),
            )

        logger.info(
            "time correction %s created: employee=%s date=%s %s -> %s",
            created.request_id, employee_id, request_date, session_type.value, requested,
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
    ) -> TimeCorrectionRequest:
        """Decide a pending request; approval rewrites the slot and recomputes the day's status."""

        now = now or datetime.now()
        status = RequestStatus.APPROVED if approved else RequestStatus.REJECTED

        with self._transactions.transaction():
            req = self._requests.get(int(request_id))
            if not req:
                raise RequestNotFound(f"Time correction request {request_id} not found")
            if not req.is_pending:
                raise AlreadyProcessed(f"Time correction request {request_id} has already been processed")

            decided = self._requests.decide(
                request_id=req.request_id,
                status=status,
                approved_by=int(approver_id),
                approved_at=now,
                comments=(comments or "").strip() or None,
            )
            if not decided:
                raise AlreadyProcessed(f"Time correction request {request_id} has already been processed")

            if approved:
                record = self._attendance.get_or_create_record(req.employee_id, req.request_date)
                self._attendance.set_slot_time(record.record_id, req.session_type, req.requested_at)

        logger.info("time correction %s %s by %s", request_id, status.value, approver_id)
        return self._requests.get(int(request_id)) or req

    def delete(self, request_id: int) -> None:
        req = self._requests.get(int(request_id))
        if not req:
            raise RequestNotFound(f"Time correction request {request_id} not found")
        if not req.is_pending or not self._requests.delete_pending(req.request_id):
            raise CannotDeleteProcessed("Cannot delete processed requests")
        logger.info("time correction %s deleted", request_id)

    def get(self, request_id: int) -> TimeCorrectionRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise RequestNotFound(f"Time correction request {request_id} not found")
        return req

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[RequestStatus | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[TimeCorrectionRequest]:
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
        rows = self._requests.list_for_employee(int(employee_id), start_date=start_date, end_date=end_date, limit=None)
        return RequestStats(
            total_requests=len(rows),
            pending_requests=sum(1 for r in rows if r.status == RequestStatus.PENDING),
            approved_requests=sum(1 for r in rows if r.status == RequestStatus.APPROVED),
            rejected_requests=sum(1 for r in rows if r.status == RequestStatus.REJECTED),
        )

    def validate(
        self,
        employee_id: int,
        request_date: date,
        session_type: SessionType | str,
        requested_time: TimeLike,
        reason: str,
        *,
        now: datetime | None = None,
    ) -> ValidationReport:
        now = now or datetime.now()
        errors: list[str] = []

        employee_ok = True
        try:
            require_active_employee(self._employees, employee_id)
        except DomainError as exc:
            employee_ok = False
            errors.append(str(exc))

        if request_date > now.date():
            errors.append("Cannot request correction for future dates")

        slot: Optional[SessionType] = None
        try:
            slot = _as_slot(session_type)
        except ValidationError as exc:
            errors.append(str(exc))

        try:
            requested = TimeOfDay.parse(requested_time)
            if requested.on(request_date) > now:
                errors.append("Requested time cannot be in the future")
        except ValidationError as exc:
            errors.append(str(exc))

        if not reason or len(reason.strip()) < MIN_REASON_LENGTH:
            errors.append(f"Reason must be at least {MIN_REASON_LENGTH} characters long")

        if employee_ok and slot is not None:
            pending = self._requests.list_for_employee(
                int(employee_id), status=RequestStatus.PENDING, start_date=request_date, end_date=request_date
            )
            if any(r.session_type == slot for r in pending):
                errors.append("A pending time correction request already exists for this date and session type")

        return ValidationReport(errors=errors)
