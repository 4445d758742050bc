from decimal import Decimal

import pytest

from src.timekeeping.timekeeping.core.exceptions import ValidationError
from src.timekeeping.timekeeping.overtime.accrual.factory import accrual_policy_for
from src.timekeeping.timekeeping.overtime.accrual.no_accrual import NoAccrual
from src.timekeeping.timekeeping.overtime.accrual.overtime_to_leave import OvertimeToLeaveAccrual


def test_factory_defaults_to_no_accrual(world):
    assert isinstance(accrual_policy_for("", ledger=world.leave, settings=world.settings), NoAccrual)
    assert isinstance(accrual_policy_for("none", ledger=world.leave, settings=world.settings), NoAccrual)


def test_factory_builds_accrual_rule(world):
    policy = accrual_policy_for(" ACCRUE ", ledger=world.leave, settings=world.settings)
    assert isinstance(policy, OvertimeToLeaveAccrual)


def test_factory_rejects_unknown_rule(world):
    with pytest.raises(ValidationError):
        accrual_policy_for("double", ledger=world.leave, settings=world.settings)


def test_ratio_comes_from_settings(world):
    policy = OvertimeToLeaveAccrual(world.leave, world.settings)
    assert policy.ratio() == Decimal("0.125")

    world.settings.values["overtime_to_leave_ratio"] = "0.25"
    assert policy.ratio() == Decimal("0.25")

    world.settings.values["overtime_to_leave_ratio"] = "lots"
    assert policy.ratio() == Decimal("0.125")
