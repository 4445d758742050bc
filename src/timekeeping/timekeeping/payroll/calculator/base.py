from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import PayrollAmounts, PayrollInputs


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(
        self,
        inputs: PayrollInputs,
        *,
        base_salary: Decimal,
        expected_hours: Decimal,
        benefits: Decimal = Decimal("0"),
        other_deductions: Decimal = Decimal("0"),
    ) -> PayrollAmounts:
        raise NotImplementedError
