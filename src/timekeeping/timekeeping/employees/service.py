from __future__ import annotations

from ..core.exceptions import EmployeeInactive, EmployeeNotFound
from .model import Employee
from .repository import EmployeeDirectory


def require_active_employee(employees: EmployeeDirectory, employee_id: int) -> Employee:
    employee = employees.get_by_id(int(employee_id))
    if not employee:
        raise EmployeeNotFound(f"Employee {employee_id} not found")
    if not employee.is_active:
        raise EmployeeInactive(f"Employee {employee_id} is not active ({employee.status.value})")
    return employee
