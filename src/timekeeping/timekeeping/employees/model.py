from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Employee directory entry as seen by the timekeeping core.

    Note: Employee CRUD lives in the HR directory; this is read-only here.
    """

    employee_id: int
    employee_code: str
    status: EmployeeStatus
    base_salary: Decimal = Decimal("0")

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
