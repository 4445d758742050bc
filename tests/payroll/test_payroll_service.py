from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.timekeeping.timekeeping.core.enums import PayrollStatus, SessionType
from src.timekeeping.timekeeping.core.exceptions import (
    EmployeeNotFound,
    PayrollPeriodNotFound,
    PayrollRecordLocked,
    ValidationError,
)

JAN_1 = date(2026, 1, 1)
JAN_31 = date(2026, 1, 31)


def work(world, day: int, *, morning_in=(8, 0), afternoon_out=(17, 0), overtime=None):
    svc = world.attendance
    record = svc.get_or_create_record(1, date(2026, 1, day))
    svc.append_session(record.record_id, SessionType.MORNING_IN, datetime(2026, 1, day, *morning_in))
    svc.append_session(record.record_id, SessionType.MORNING_OUT, datetime(2026, 1, day, 12))
    svc.append_session(record.record_id, SessionType.AFTERNOON_IN, datetime(2026, 1, day, 13))
    svc.append_session(record.record_id, SessionType.AFTERNOON_OUT, datetime(2026, 1, day, *afternoon_out))
    if overtime:
        start, end = overtime
        svc.append_session(
            record.record_id,
            SessionType.OVERTIME,
            datetime(2026, 1, day, start),
            clock_out=datetime(2026, 1, day, end),
        )


def test_collect_inputs_sums_calculated_days(world):
    work(world, 5)
    work(world, 6, morning_in=(8, 30), overtime=(18, 20))

    inputs = world.payroll.collect_inputs(1, start_date=JAN_1, end_date=JAN_31)

    assert inputs.days_recorded == 2
    assert inputs.total_regular_hours == Decimal("15.5")
    assert inputs.total_overtime_hours == Decimal("2.0")
    assert inputs.total_worked_hours == Decimal("17.5")
    assert inputs.total_late_hours == Decimal("0.5")


def test_collect_inputs_empty_range(world):
    inputs = world.payroll.collect_inputs(1, start_date=JAN_1, end_date=JAN_31)
    assert inputs.days_recorded == 0
    assert inputs.total_worked_hours == Decimal("0")


def test_collect_inputs_rejects_inverted_range(world):
    with pytest.raises(ValidationError):
        world.payroll.collect_inputs(1, start_date=JAN_31, end_date=JAN_1)


def test_materialize_writes_draft(world):
    world.payroll_repo.add_period(1, JAN_1, JAN_31)
    work(world, 5, overtime=(18, 20))

    record = world.payroll.materialize(1, 1, benefits="50")

    assert record.status == PayrollStatus.DRAFT
    assert record.hourly_rate == Decimal("100.0000")
    assert record.total_regular_hours == Decimal("8.0")
    # 8h * 100 + 2h * 150
    assert record.gross_pay == Decimal("1100.00")
    assert record.net_pay == Decimal("1150.00")


def test_expected_hours_fallbacks(world):
    with_hours = world.payroll_repo.add_period(1, JAN_1, JAN_31, expected_hours="160")
    without = world.payroll_repo.add_period(2, JAN_1, JAN_31)

    assert world.payroll.expected_hours(with_hours) == Decimal("160")
    assert world.payroll.expected_hours(without) == Decimal("176")

    world.settings.values["expected_monthly_hours"] = "168"
    assert world.payroll.expected_hours(without) == Decimal("168")

    world.settings.values["expected_monthly_hours"] = "n/a"
    assert world.payroll.expected_hours(without) == Decimal("176")


def test_rematerialize_overwrites_draft(world):
    world.payroll_repo.add_period(1, JAN_1, JAN_31)
    first = world.payroll.materialize(1, 1)
    work(world, 5)
    second = world.payroll.materialize(1, 1)

    assert second.payroll_record_id == first.payroll_record_id
    assert second.gross_pay == Decimal("800.00")


def test_processed_record_is_locked(world):
    world.payroll_repo.add_period(1, JAN_1, JAN_31)
    world.payroll.materialize(1, 1)
    world.payroll_repo.set_status(1, 1, PayrollStatus.PROCESSED)

    with pytest.raises(PayrollRecordLocked):
        world.payroll.materialize(1, 1)


def test_unknown_period_and_employee(world):
    world.payroll_repo.add_period(1, JAN_1, JAN_31)

    with pytest.raises(PayrollPeriodNotFound):
        world.payroll.materialize(9, 1)
    with pytest.raises(EmployeeNotFound):
        world.payroll.materialize(1, 404)


def test_negative_adjustments_are_rejected(world):
    world.payroll_repo.add_period(1, JAN_1, JAN_31)
    with pytest.raises(ValidationError):
        world.payroll.materialize(1, 1, other_deductions="-1")
