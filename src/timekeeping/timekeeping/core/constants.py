"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

PARTIAL_DAY_HOURS = 4.0
FULL_DAY_HOURS = 8.0

DEFAULT_MORNING_START = "08:00:00"
DEFAULT_MORNING_END = "12:00:00"
DEFAULT_AFTERNOON_START = "13:00:00"
DEFAULT_LATE_GRACE_MINUTES = 5

# Allowed gap between the requested hours and the start/end window.
OVERTIME_HOURS_TOLERANCE = 0.1
OVERTIME_PAY_MULTIPLIER = Decimal("1.5")

OVERTIME_TO_LEAVE_RATIO_KEY = "overtime_to_leave_ratio"
DEFAULT_OVERTIME_TO_LEAVE_RATIO = Decimal("0.125")

MIN_REASON_LENGTH = 10
DEFAULT_HISTORY_DAYS = 30
DEFAULT_LIST_LIMIT = 200

DEFAULT_MAX_SELFIE_BYTES = 5 * 1024 * 1024

EXPECTED_MONTHLY_HOURS_KEY = "expected_monthly_hours"
DEFAULT_EXPECTED_MONTHLY_HOURS = Decimal("176")
