import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "")
MAX_SELFIE_BYTES = 1024 * 1024

OVERTIME_LEAVE_RULE = os.getenv("OVERTIME_LEAVE_RULE", "none")
DEFAULT_OVERTIME_TO_LEAVE_RATIO = "0.125"
LEAVE_CLAMP_INSUFFICIENT = True

MORNING_START = "08:00:00"
MORNING_END = "12:00:00"
AFTERNOON_START = "13:00:00"
LATE_GRACE_MINUTES = 5
