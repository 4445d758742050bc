from __future__ import annotations

from typing import Optional

from ...leave.model import LeaveBalance
from ..model import OvertimeRequest
from .base import LeaveAccrualPolicy


class NoAccrual(LeaveAccrualPolicy):
    """Current rule: overtime does not convert to leave; HR adjusts balances by hand."""

    name = "none"

    def accrue(self, request: OvertimeRequest) -> Optional[LeaveBalance]:
        return None
