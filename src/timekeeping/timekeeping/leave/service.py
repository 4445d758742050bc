from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveType
from ..core.exceptions import ValidationError
from .model import LeaveAccrual, LeaveBalance, LeaveBalanceUpdate
from .repository import LeaveAccrualRepository, LeaveBalanceRepository

logger = logging.getLogger(__name__)


def _as_days(value, *, allow_zero: bool = False) -> Decimal:
    try:
        days = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid number of days: {value!r}")
    if not days.is_finite():
        raise ValidationError(f"Invalid number of days: {value!r}")
    if days < 0 or (days == 0 and not allow_zero):
        raise ValidationError("Number of days must be greater than 0")
    return days


def _as_leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError(f"Unknown leave type: {value!r}")


class LeaveBalanceService:
    """Leave balance ledger.

    ``clamp_insufficient`` decides what consuming more than the balance does:
    True drains the balance to 0, False leaves it untouched and returns None.
    Overtime credits also write one audit row per request to ``accruals``.
    """

    def __init__(
        self,
        balances: LeaveBalanceRepository,
        accruals: LeaveAccrualRepository,
        *,
        clamp_insufficient: bool = True,
    ):
        self._balances = balances
        self._accruals = accruals
        self._clamp = bool(clamp_insufficient)

    def add_leave_days(self, employee_id: int, leave_type: LeaveType | str, days) -> LeaveBalance:
        leave_type = _as_leave_type(leave_type)
        days = _as_days(days)
        balance = self._balances.add_days(employee_id=int(employee_id), leave_type=leave_type, days=days)
        logger.info("leave +%s %s for employee %s -> %s", days, leave_type.value, employee_id, balance.balance)
        return balance

    def use_leave_days(
        self,
        employee_id: int,
        leave_type: LeaveType | str,
        days,
        *,
        clamp: Optional[bool] = None,
    ) -> Optional[LeaveBalance]:
        leave_type = _as_leave_type(leave_type)
        days = _as_days(days)
        balance = self._balances.consume_days(
            employee_id=int(employee_id),
            leave_type=leave_type,
            days=days,
            clamp=self._clamp if clamp is None else bool(clamp),
        )
        if balance is None:
            logger.info("leave -%s %s for employee %s not applied", days, leave_type.value, employee_id)
        else:
            logger.info("leave -%s %s for employee %s -> %s", days, leave_type.value, employee_id, balance.balance)
        return balance

    def accrue_from_overtime(
        self,
        employee_id: int,
        overtime_request_id: int,
        overtime_hours,
        days,
        leave_type: LeaveType | str = LeaveType.VACATION,
    ) -> LeaveBalance:
        """Credit days earned by an approved overtime request and record the audit row.

        Call inside the approval transaction; a second accrual for the same
        request raises ConflictError.
        """

        leave_type = _as_leave_type(leave_type)
        days = _as_days(days)
        accrual = self._accruals.create(
            employee_id=int(employee_id),
            overtime_request_id=int(overtime_request_id),
            overtime_hours=Decimal(str(overtime_hours)),
            leave_days=days,
            leave_type=leave_type,
        )
        logger.info("accrual %s recorded for overtime request %s", accrual.accrual_id, overtime_request_id)
        return self.add_leave_days(employee_id, leave_type, days)

    def list_accruals(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveAccrual]:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        return self._accruals.list_for_employee(int(employee_id), start_date=start_date, end_date=end_date)

    def get_balance(self, employee_id: int, leave_type: LeaveType | str) -> Decimal:
        row = self._balances.get(int(employee_id), _as_leave_type(leave_type))
        return row.balance if row else Decimal("0")

    def get_balances(self, employee_id: int) -> Sequence[LeaveBalance]:
        return self._balances.list_for_employee(int(employee_id))

    def bulk_upsert(self, entries: Iterable[dict | LeaveBalanceUpdate]) -> int:
        """HR overwrite of balances; every entry is validated before any write."""

        updates: list[LeaveBalanceUpdate] = []
        for i, e in enumerate(entries):
            if isinstance(e, LeaveBalanceUpdate):
                e = {"employee_id": e.employee_id, "leave_type": e.leave_type, "balance": e.balance}
            try:
                employee_id = int(e["employee_id"])
            except (KeyError, TypeError, ValueError):
                raise ValidationError(f"Entry {i}: employee_id is required")
            updates.append(
                LeaveBalanceUpdate(
                    employee_id=employee_id,
                    leave_type=_as_leave_type(e.get("leave_type")),
                    balance=_as_days(e.get("balance"), allow_zero=True),
                )
            )

        count = self._balances.upsert_many(updates)
        logger.info("bulk leave balance upsert: %s rows", count)
        return count
