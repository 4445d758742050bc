from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def hours_between(start: datetime, end: datetime) -> float:
    """Signed duration in hours; callers clamp when needed."""
    return (end - start).total_seconds() / 3600


def round_hours(value: float) -> float:
    return round(value, 2)
