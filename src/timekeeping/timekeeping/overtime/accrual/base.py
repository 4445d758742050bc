from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...leave.model import LeaveBalance
from ..model import OvertimeRequest


class LeaveAccrualPolicy(ABC):
    """What an approved overtime request does to the leave ledger (Strategy Pattern).

    One policy is chosen at deployment time; it runs inside the approval
    transaction.
    """

    name: str = ""

    @abstractmethod
    def accrue(self, request: OvertimeRequest) -> Optional[LeaveBalance]:
        raise NotImplementedError
