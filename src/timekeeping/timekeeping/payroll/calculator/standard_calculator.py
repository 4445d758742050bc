from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import OVERTIME_PAY_MULTIPLIER
from ...core.exceptions import ValidationError
from ..model import PayrollAmounts, PayrollInputs
from .base import PayrollCalculator

_CENT = Decimal("0.01")
_RATE = Decimal("0.0001")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule.

    hourly rate = base salary / expected hours; regular pay is capped at the
    expected hours; overtime is paid at 1.5x; late hours are deducted at the
    hourly rate; net = gross + benefits - deductions.
    """

    def __init__(self, *, overtime_multiplier: Decimal = OVERTIME_PAY_MULTIPLIER):
        self._overtime_multiplier = Decimal(str(overtime_multiplier))

    def compute(
        self,
        inputs: PayrollInputs,
        *,
        base_salary: Decimal,
        expected_hours: Decimal,
        benefits: Decimal = Decimal("0"),
        other_deductions: Decimal = Decimal("0"),
    ) -> PayrollAmounts:
        if expected_hours <= 0:
            raise ValidationError("Expected hours must be greater than 0")

        rate = (Decimal(base_salary) / Decimal(expected_hours)).quantize(_RATE, rounding=ROUND_HALF_UP)
        regular_pay = _money(min(inputs.total_regular_hours, Decimal(expected_hours)) * rate)
        overtime_pay = _money(inputs.total_overtime_hours * rate * self._overtime_multiplier)
        late_deductions = _money(inputs.total_late_hours * rate)

        gross = regular_pay + overtime_pay
        total_deductions = late_deductions + _money(Decimal(other_deductions))
        total_benefits = _money(Decimal(benefits))
        return PayrollAmounts(
            hourly_rate=rate,
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            late_deductions=late_deductions,
            gross_pay=gross,
            total_deductions=total_deductions,
            total_benefits=total_benefits,
            net_pay=gross + total_benefits - total_deductions,
        )
