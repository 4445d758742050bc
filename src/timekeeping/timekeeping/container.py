from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from .attendance.calculator.session_calculator import SessionTypedHoursCalculator, ShiftWindows
from .attendance.images import LocalSelfieStorage
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.time_of_day import TimeOfDay
from .core.constants import (
    DEFAULT_AFTERNOON_START,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_MAX_SELFIE_BYTES,
    DEFAULT_MORNING_END,
    DEFAULT_MORNING_START,
    DEFAULT_OVERTIME_TO_LEAVE_RATIO,
)
from .corrections.mysql_correction_repository import MySQLTimeCorrectionRepository
from .corrections.service import TimeCorrectionService
from .database.bootstrap import as_db_config
from .database.connection import DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .leave.mysql_leave_accrual_repository import MySQLLeaveAccrualRepository
from .leave.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leave.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leave.request_service import LeaveRequestService
from .leave.service import LeaveBalanceService
from .overtime.accrual.factory import accrual_policy_for
from .overtime.mysql_overtime_repository import MySQLOvertimeRequestRepository
from .overtime.service import OvertimeService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .settings.mysql_settings_repository import MySQLSettingsStore


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_service: AttendanceService
    overtime_service: OvertimeService
    correction_service: TimeCorrectionService
    leave_service: LeaveBalanceService
    leave_request_service: LeaveRequestService
    payroll_service: PayrollService


def shift_windows_from(options: Mapping[str, Any]) -> ShiftWindows:
    return ShiftWindows(
        morning_start=TimeOfDay.parse(options.get("MORNING_START", DEFAULT_MORNING_START)),
        afternoon_start=TimeOfDay.parse(options.get("AFTERNOON_START", DEFAULT_AFTERNOON_START)),
        grace_minutes=int(options.get("LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        morning_end=TimeOfDay.parse(options.get("MORNING_END", DEFAULT_MORNING_END)),
    )


def build_container(*, db_config: dict, options: Optional[Mapping[str, Any]] = None) -> Container:
    """Wire repositories and services.

    ``options`` carries the settings-module values (OVERTIME_LEAVE_RULE,
    UPLOAD_DIR, MAX_SELFIE_BYTES, shift windows, LEAVE_CLAMP_INSUFFICIENT).
    """

    options = dict(options or {})
    conn = DatabaseConnection(as_db_config(db_config))

    employees = MySQLEmployeeDirectory(conn)
    settings = MySQLSettingsStore(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    overtime_repo = MySQLOvertimeRequestRepository(conn)
    corrections_repo = MySQLTimeCorrectionRepository(conn)
    leave_repo = MySQLLeaveBalanceRepository(conn)
    accrual_repo = MySQLLeaveAccrualRepository(conn)
    leave_request_repo = MySQLLeaveRequestRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)

    windows = shift_windows_from(options)
    selfies = None
    if options.get("UPLOAD_DIR"):
        selfies = LocalSelfieStorage(
            options["UPLOAD_DIR"],
            max_bytes=int(options.get("MAX_SELFIE_BYTES", DEFAULT_MAX_SELFIE_BYTES)),
        )

    attendance_service = AttendanceService(
        attendance_repo,
        employees,
        conn,
        calculator=SessionTypedHoursCalculator(windows),
        selfie_storage=selfies,
        windows=windows,
    )
    leave_service = LeaveBalanceService(
        leave_repo,
        accrual_repo,
        clamp_insufficient=bool(options.get("LEAVE_CLAMP_INSUFFICIENT", True)),
    )
    accrual = accrual_policy_for(
        str(options.get("OVERTIME_LEAVE_RULE", "none")),
        ledger=leave_service,
        settings=settings,
        default_ratio=Decimal(str(options.get("DEFAULT_OVERTIME_TO_LEAVE_RATIO", DEFAULT_OVERTIME_TO_LEAVE_RATIO))),
    )
    overtime_service = OvertimeService(overtime_repo, employees, attendance_service, conn, accrual=accrual)
    correction_service = TimeCorrectionService(corrections_repo, employees, attendance_service, conn)
    leave_request_service = LeaveRequestService(leave_request_repo, employees, leave_service, conn)
    payroll_service = PayrollService(attendance_service, employees, payroll_repo, settings, conn)

    return Container(
        conn=conn,
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        correction_service=correction_service,
        leave_service=leave_service,
        leave_request_service=leave_request_service,
        payroll_service=payroll_service,
    )
