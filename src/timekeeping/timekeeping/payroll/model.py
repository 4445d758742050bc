from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollPeriod:
    payroll_period_id: int
    start_date: date
    end_date: date
    # None: fall back to the expected_monthly_hours setting.
    expected_hours: Optional[Decimal] = None
    period_name: Optional[str] = None


@dataclass(frozen=True)
class PayrollInputs:
    """Hours contract exposed to payroll: calculator output summed over a period."""

    employee_id: int
    start_date: date
    end_date: date
    days_recorded: int
    total_worked_hours: Decimal
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    total_late_hours: Decimal


@dataclass(frozen=True)
class PayrollAmounts:
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    late_deductions: Decimal
    gross_pay: Decimal
    total_deductions: Decimal
    total_benefits: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_record_id: int
    payroll_period_id: int
    employee_id: int
    base_salary: Decimal
    hourly_rate: Decimal
    total_worked_hours: Decimal
    total_regular_hours: Decimal
    total_overtime_hours: Decimal
    total_late_hours: Decimal
    late_deductions: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    total_deductions: Decimal
    total_benefits: Decimal
    status: PayrollStatus = PayrollStatus.DRAFT
    updated_at: Optional[datetime] = None

    @property
    def is_locked(self) -> bool:
        return self.status != PayrollStatus.DRAFT
