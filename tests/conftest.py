from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.timekeeping.timekeeping.attendance.service import AttendanceService
from src.timekeeping.timekeeping.container import Container
from src.timekeeping.timekeeping.core.enums import EmployeeStatus
from src.timekeeping.timekeeping.corrections.service import TimeCorrectionService
from src.timekeeping.timekeeping.leave.request_service import LeaveRequestService
from src.timekeeping.timekeeping.leave.service import LeaveBalanceService
from src.timekeeping.timekeeping.overtime.service import OvertimeService
from src.timekeeping.timekeeping.payroll.service import PayrollService
from tests.fakes import (
    InMemoryAttendance,
    InMemoryCorrections,
    InMemoryEmployees,
    InMemoryLeaveAccruals,
    InMemoryLeaveBalances,
    InMemoryLeaveRequests,
    InMemoryOvertime,
    InMemoryPayroll,
    InMemorySettings,
    NoTransactions,
)

ACTIVE_ID = 1
INACTIVE_ID = 2


@dataclass
class World:
    employees: InMemoryEmployees
    settings: InMemorySettings
    attendance_repo: InMemoryAttendance
    overtime_repo: InMemoryOvertime
    corrections_repo: InMemoryCorrections
    leave_repo: InMemoryLeaveBalances
    accrual_repo: InMemoryLeaveAccruals
    leave_request_repo: InMemoryLeaveRequests
    payroll_repo: InMemoryPayroll
    attendance: AttendanceService
    overtime: OvertimeService
    corrections: TimeCorrectionService
    leave: LeaveBalanceService
    leave_requests: LeaveRequestService
    payroll: PayrollService

    def container(self) -> Container:
        return Container(
            conn=NoTransactions(),
            attendance_service=self.attendance,
            overtime_service=self.overtime,
            correction_service=self.corrections,
            leave_service=self.leave,
            leave_request_service=self.leave_requests,
            payroll_service=self.payroll,
        )


@pytest.fixture
def world() -> World:
    employees = InMemoryEmployees()
    employees.add(ACTIVE_ID)
    employees.add(INACTIVE_ID, status=EmployeeStatus.INACTIVE)

    settings = InMemorySettings()
    tx = NoTransactions()
    attendance_repo = InMemoryAttendance()
    overtime_repo = InMemoryOvertime()
    corrections_repo = InMemoryCorrections()
    leave_repo = InMemoryLeaveBalances()
    accrual_repo = InMemoryLeaveAccruals()
    leave_request_repo = InMemoryLeaveRequests()
    payroll_repo = InMemoryPayroll()

    attendance = AttendanceService(attendance_repo, employees, tx)
    leave = LeaveBalanceService(leave_repo, accrual_repo)
    return World(
        employees=employees,
        settings=settings,
        attendance_repo=attendance_repo,
        overtime_repo=overtime_repo,
        corrections_repo=corrections_repo,
        leave_repo=leave_repo,
        accrual_repo=accrual_repo,
        leave_request_repo=leave_request_repo,
        payroll_repo=payroll_repo,
        attendance=attendance,
        overtime=OvertimeService(overtime_repo, employees, attendance, tx),
        corrections=TimeCorrectionService(corrections_repo, employees, attendance, tx),
        leave=leave,
        leave_requests=LeaveRequestService(leave_request_repo, employees, leave, tx),
        payroll=PayrollService(attendance, employees, payroll_repo, settings, tx),
    )
