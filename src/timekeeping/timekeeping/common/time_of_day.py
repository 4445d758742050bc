from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from ..core.exceptions import ValidationError

TimeLike = Union["TimeOfDay", str, time, timedelta]


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Zone-naive wall-clock time (HH:MM:SS) with no date attached.

    Overtime windows and correction times travel as this type from input to
    storage; it only becomes a ``datetime`` when combined with the request
    date for arithmetic, so no timezone conversion can shift it.
    """

    hour: int
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59 and 0 <= self.second <= 59):
            raise ValidationError(f"Invalid time of day: {self.hour}:{self.minute}:{self.second}")

    @classmethod
    def parse(cls, value: TimeLike) -> "TimeOfDay":
        """Accept 'HH:MM', 'HH:MM:SS', datetime.time or a MySQL TIME timedelta."""

        if isinstance(value, TimeOfDay):
            return value
        if isinstance(value, time):
            return cls(value.hour, value.minute, value.second)
        if isinstance(value, timedelta):
            total_seconds = int(value.total_seconds()) % 86400
            return cls(total_seconds // 3600, (total_seconds % 3600) // 60, total_seconds % 60)
        if isinstance(value, str):
            parts = value.strip().split(":")
            if len(parts) not in (2, 3):
                raise ValidationError(f"Invalid time format (HH:MM[:SS]): {value!r}")
            try:
                numbers = [int(p) for p in parts]
            except ValueError:
                raise ValidationError(f"Invalid time format (HH:MM[:SS]): {value!r}")
            return cls(*numbers)
        raise ValidationError(f"Unsupported time value: {value!r}")

    @classmethod
    def of(cls, moment: datetime) -> "TimeOfDay":
        return cls(moment.hour, moment.minute, moment.second)

    def to_seconds(self) -> int:
        return self.hour * 3600 + self.minute * 60 + self.second

    def to_time(self) -> time:
        return time(self.hour, self.minute, self.second)

    def on(self, day: date) -> datetime:
        return datetime.combine(day, self.to_time())

    def hours_until(self, other: "TimeOfDay") -> float:
        return (other.to_seconds() - self.to_seconds()) / 3600

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


def intervals_overlap(a_start: TimeOfDay, a_end: TimeOfDay, b_start: TimeOfDay, b_end: TimeOfDay) -> bool:
    """Half-open overlap: touching boundaries do not overlap."""
    return a_start < b_end and b_start < a_end
