from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveBalance:
    """Running entitlement of paid days off, one row per (employee, leave type)."""

    balance_id: int
    employee_id: int
    leave_type: LeaveType
    balance: Decimal
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveBalanceUpdate:
    """HR overwrite of one balance (bulk upsert input)."""

    employee_id: int
    leave_type: LeaveType
    balance: Decimal


@dataclass(frozen=True)
class LeaveAccrual:
    """Audit row for vacation days credited from one approved overtime request."""

    accrual_id: int
    employee_id: int
    overtime_request_id: int
    overtime_hours: Decimal
    leave_days: Decimal
    leave_type: LeaveType
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveRequest:
    """Days off asked for over an inclusive date range; weekends are not counted."""

    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: RequestStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
