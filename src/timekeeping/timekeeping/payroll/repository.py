from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from .model import PayrollAmounts, PayrollInputs, PayrollPeriod, PayrollRecord


class PayrollRepository(Protocol):
    def get_period(self, payroll_period_id: int) -> Optional[PayrollPeriod]:
        raise NotImplementedError

    def get_record(self, payroll_period_id: int, employee_id: int, *, for_update: bool = False) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def save_draft(
        self,
        *,
        payroll_period_id: int,
        employee_id: int,
        base_salary: Decimal,
        inputs: PayrollInputs,
        amounts: PayrollAmounts,
    ) -> PayrollRecord:
        """Insert or overwrite the (period, employee) row as a draft."""

        raise NotImplementedError
