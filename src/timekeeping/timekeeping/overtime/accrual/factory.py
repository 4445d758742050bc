from __future__ import annotations

from decimal import Decimal

from ...core.constants import DEFAULT_OVERTIME_TO_LEAVE_RATIO
from ...core.exceptions import ValidationError
from ...leave.service import LeaveBalanceService
from ...settings.repository import SettingsStore
from .base import LeaveAccrualPolicy
from .no_accrual import NoAccrual
from .overtime_to_leave import OvertimeToLeaveAccrual


def accrual_policy_for(
    rule: str,
    *,
    ledger: LeaveBalanceService,
    settings: SettingsStore,
    default_ratio: Decimal = DEFAULT_OVERTIME_TO_LEAVE_RATIO,
) -> LeaveAccrualPolicy:
    """Factory Pattern: map the OVERTIME_LEAVE_RULE setting to a policy."""

    key = (rule or NoAccrual.name).strip().lower()
    if key == NoAccrual.name:
        return NoAccrual()
    if key == OvertimeToLeaveAccrual.name:
        return OvertimeToLeaveAccrual(ledger, settings, default_ratio=default_ratio)
    raise ValidationError(f"Unknown overtime leave rule: {rule!r} (expected 'none' or 'accrue')")
