from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationReport:
    """Dry-run result of a request form: every problem, nothing raised."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class RequestStats:
    total_requests: int = 0
    pending_requests: int = 0
    approved_requests: int = 0
    rejected_requests: int = 0
    # Overtime only; correction requests carry no hours.
    total_hours: float = 0.0
    approved_hours: float = 0.0
