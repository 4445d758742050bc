from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from ...core.constants import DEFAULT_OVERTIME_TO_LEAVE_RATIO, OVERTIME_TO_LEAVE_RATIO_KEY
from ...core.enums import LeaveType
from ...leave.model import LeaveBalance
from ...leave.service import LeaveBalanceService
from ...settings.repository import SettingsStore
from ..model import OvertimeRequest
from .base import LeaveAccrualPolicy

logger = logging.getLogger(__name__)


class OvertimeToLeaveAccrual(LeaveAccrualPolicy):
    """Credit ``requested_hours * ratio`` days of vacation, with one audit row per request.

    The ratio is read from the settings store at approval time
    (default 0.125, i.e. one day per 8 hours).
    """

    name = "accrue"

    def __init__(
        self,
        ledger: LeaveBalanceService,
        settings: SettingsStore,
        *,
        default_ratio: Decimal = DEFAULT_OVERTIME_TO_LEAVE_RATIO,
    ):
        self._ledger = ledger
        self._settings = settings
        self._default_ratio = Decimal(str(default_ratio))

    def ratio(self) -> Decimal:
        raw = self._settings.get_value(OVERTIME_TO_LEAVE_RATIO_KEY)
        if raw is None or not str(raw).strip():
            return self._default_ratio
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            logger.warning("invalid %s setting %r, using %s", OVERTIME_TO_LEAVE_RATIO_KEY, raw, self._default_ratio)
            return self._default_ratio
        if not value.is_finite() or value < 0:
            logger.warning("invalid %s setting %r, using %s", OVERTIME_TO_LEAVE_RATIO_KEY, raw, self._default_ratio)
            return self._default_ratio
        return value

    def accrue(self, request: OvertimeRequest) -> Optional[LeaveBalance]:
        days = Decimal(str(request.requested_hours)) * self.ratio()
        if days <= 0:
            return None
        balance = self._ledger.accrue_from_overtime(
            request.employee_id,
            request.request_id,
            request.requested_hours,
            days,
            LeaveType.VACATION,
        )
        logger.info(
            "overtime request %s accrued %s vacation days for employee %s",
            request.request_id, days, request.employee_id,
        )
        return balance
