from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..attendance.service import AttendanceService
from ..core.constants import DEFAULT_EXPECTED_MONTHLY_HOURS, EXPECTED_MONTHLY_HOURS_KEY
from ..core.exceptions import EmployeeNotFound, PayrollPeriodNotFound, PayrollRecordLocked, ValidationError
from ..database.connection import TransactionManager
from ..employees.repository import EmployeeDirectory
from ..settings.repository import SettingsStore
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollInputs, PayrollPeriod, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _hours(value: float) -> Decimal:
    return Decimal(str(round(value, 2)))


class PayrollService:
    """Payroll aggregation: attendance hours per period -> draft PayrollRecord."""

    def __init__(
        self,
        attendance: AttendanceService,
        employees: EmployeeDirectory,
        payroll: PayrollRepository,
        settings: SettingsStore,
        transactions: TransactionManager,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._payroll = payroll
        self._settings = settings
        self._transactions = transactions
        self._calculator = calculator or StandardPayrollCalculator()

    def collect_inputs(self, employee_id: int, *, start_date: date, end_date: date) -> PayrollInputs:
        """Sum the hours calculator's output over every stored day in the range.

        Re-derived from sessions on each call, never from cached statuses.
        """

        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        days = self._attendance.daily_hours_between(int(employee_id), start_date=start_date, end_date=end_date)
        return PayrollInputs(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            days_recorded=len(days),
            total_worked_hours=sum((_hours(h.total_hours) for _, h in days), Decimal("0")),
            total_regular_hours=sum((_hours(h.regular_hours) for _, h in days), Decimal("0")),
            total_overtime_hours=sum((_hours(h.overtime_hours) for _, h in days), Decimal("0")),
            total_late_hours=sum((_hours(h.late_hours) for _, h in days), Decimal("0")),
        )

    def get_period(self, payroll_period_id: int) -> PayrollPeriod:
        period = self._payroll.get_period(int(payroll_period_id))
        if not period:
            raise PayrollPeriodNotFound(f"Payroll period {payroll_period_id} not found")
        return period

    def inputs_for_period(self, employee_id: int, payroll_period_id: int) -> PayrollInputs:
        period = self.get_period(payroll_period_id)
        return self.collect_inputs(employee_id, start_date=period.start_date, end_date=period.end_date)

    def expected_hours(self, period: PayrollPeriod) -> Decimal:
        if period.expected_hours:
            return period.expected_hours
        raw = self._settings.get_value(EXPECTED_MONTHLY_HOURS_KEY)
        if raw:
            try:
                value = Decimal(str(raw).strip())
                if value.is_finite() and value > 0:
                    return value
            except InvalidOperation:
                pass
            logger.warning("invalid %s setting %r, using %s", EXPECTED_MONTHLY_HOURS_KEY, raw, DEFAULT_EXPECTED_MONTHLY_HOURS)
        return DEFAULT_EXPECTED_MONTHLY_HOURS

    def get_record(self, payroll_period_id: int, employee_id: int) -> Optional[PayrollRecord]:
        return self._payroll.get_record(int(payroll_period_id), int(employee_id))

    def materialize(
        self,
        payroll_period_id: int,
        employee_id: int,
        *,
        benefits: Decimal | int | str = Decimal("0"),
        other_deductions: Decimal | int | str = Decimal("0"),
    ) -> PayrollRecord:
        """Compute and store the draft record for one employee and period.

        Raises PayrollRecordLocked once the record is processed or paid.
        """

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound(f"Employee {employee_id} not found")
        period = self.get_period(payroll_period_id)

        try:
            benefits = Decimal(str(benefits))
            other_deductions = Decimal(str(other_deductions))
        except InvalidOperation:
            raise ValidationError("Benefits and deductions must be numbers")
        if benefits < 0 or other_deductions < 0:
            raise ValidationError("Benefits and deductions cannot be negative")

        with self._transactions.transaction():
            existing = self._payroll.get_record(period.payroll_period_id, employee.employee_id, for_update=True)
            if existing and existing.is_locked:
                raise PayrollRecordLocked(
                    f"Payroll record for employee {employee_id} in period {payroll_period_id} is {existing.status.value}"
                )

            inputs = self.collect_inputs(employee.employee_id, start_date=period.start_date, end_date=period.end_date)
            amounts = self._calculator.compute(
                inputs,
                base_salary=employee.base_salary,
                expected_hours=self.expected_hours(period),
                benefits=benefits,
                other_deductions=other_deductions,
            )
            record = self._payroll.save_draft(
                payroll_period_id=period.payroll_period_id,
                employee_id=employee.employee_id,
                base_salary=employee.base_salary,
                inputs=inputs,
                amounts=amounts,
            )

        logger.info(
            "payroll draft for employee %s period %s: gross=%s net=%s",
            employee_id, payroll_period_id, record.gross_pay, record.net_pay,
        )
        return record
