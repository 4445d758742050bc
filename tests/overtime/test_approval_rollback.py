from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.timekeeping.timekeeping.attendance.service import AttendanceService
from src.timekeeping.timekeeping.core.enums import LeaveType, RequestStatus, SessionType
from src.timekeeping.timekeeping.corrections.service import TimeCorrectionService
from src.timekeeping.timekeeping.overtime.accrual.base import LeaveAccrualPolicy
from src.timekeeping.timekeeping.overtime.accrual.overtime_to_leave import OvertimeToLeaveAccrual
from src.timekeeping.timekeeping.overtime.service import OvertimeService
from tests.fakes import InMemoryAttendance, NoTransactions, SnapshotTransactions

NOW = datetime(2026, 3, 1, 9, 0)
TOMORROW = date(2026, 3, 2)


class ExplodingAccrual(LeaveAccrualPolicy):
    name = "exploding"

    def accrue(self, request):
        raise RuntimeError("leave ledger offline")


class FailingSessions(InMemoryAttendance):
    def create_session(self, **kwargs):
        raise RuntimeError("sessions table unavailable")


class FailingRecompute(InMemoryAttendance):
    def __init__(self):
        super().__init__()
        self.fail = False

    def update_calculated_hours(self, hours_by_session):
        if self.fail:
            raise RuntimeError("lost connection during recompute")
        super().update_calculated_hours(hours_by_session)


def overtime_stack(world, attendance_repo, accrual):
    tx = SnapshotTransactions(world.overtime_repo, attendance_repo, world.leave_repo, world.accrual_repo)
    attendance = AttendanceService(attendance_repo, world.employees, tx)
    svc = OvertimeService(world.overtime_repo, world.employees, attendance, tx, accrual=accrual)
    req = svc.create(1, TOMORROW, "18:00", "20:00", "2", "Release night support", now=NOW)
    return svc, tx, req


def test_failing_accrual_keeps_request_pending_and_drops_session(world):
    svc, tx, req = overtime_stack(world, world.attendance_repo, ExplodingAccrual())

    with pytest.raises(RuntimeError):
        svc.approve(req.request_id, 99, True, now=NOW)

    assert svc.get(req.request_id).status == RequestStatus.PENDING
    assert world.attendance_repo.sessions == {}
    assert world.attendance_repo.records == {}
    assert tx.rollbacks == 1


def test_failing_session_write_skips_accrual(world):
    repo = FailingSessions()
    accrual = OvertimeToLeaveAccrual(world.leave, world.settings)
    svc, tx, req = overtime_stack(world, repo, accrual)

    with pytest.raises(RuntimeError):
        svc.approve(req.request_id, 99, True, now=NOW)

    assert svc.get(req.request_id).status == RequestStatus.PENDING
    assert repo.records == {}
    assert world.leave.get_balance(1, LeaveType.VACATION) == Decimal("0")
    assert world.leave.list_accruals(1) == []


def test_retry_after_rollback_succeeds(world):
    accrual = OvertimeToLeaveAccrual(world.leave, world.settings)
    svc, _, req = overtime_stack(world, world.attendance_repo, ExplodingAccrual())
    with pytest.raises(RuntimeError):
        svc.approve(req.request_id, 99, True, now=NOW)

    retry = OvertimeService(world.overtime_repo, world.employees, world.attendance, NoTransactions(), accrual=accrual)
    assert retry.approve(req.request_id, 99, True, now=NOW).status == RequestStatus.APPROVED
    assert len(world.leave.list_accruals(1)) == 1


def test_failing_correction_recompute_restores_slot(world):
    repo = FailingRecompute()
    tx = SnapshotTransactions(world.corrections_repo, repo)
    attendance = AttendanceService(repo, world.employees, tx)
    corrections = TimeCorrectionService(world.corrections_repo, world.employees, attendance, tx)

    record = attendance.get_or_create_record(1, TOMORROW)
    attendance.append_session(record.record_id, SessionType.MORNING_IN, datetime(2026, 3, 2, 8))
    out = attendance.append_session(record.record_id, SessionType.MORNING_OUT, datetime(2026, 3, 2, 12))
    req = corrections.create(1, TOMORROW, "morning_out", "11:00", "Badge reader was down", now=datetime(2026, 3, 3, 9))
    repo.fail = True

    with pytest.raises(RuntimeError):
        corrections.approve(req.request_id, 99, True, now=datetime(2026, 3, 3, 9))

    assert corrections.get(req.request_id).status == RequestStatus.PENDING
    assert repo.get_session(out.session_id).clock_out == datetime(2026, 3, 2, 12)
    assert repo.get_session(out.session_id).calculated_hours == 4.0
