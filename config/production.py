import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timekeeping_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/var/lib/timekeeping/selfies")
MAX_SELFIE_BYTES = int(os.getenv("MAX_SELFIE_BYTES", str(5 * 1024 * 1024)))

OVERTIME_LEAVE_RULE = os.getenv("OVERTIME_LEAVE_RULE", "none")
DEFAULT_OVERTIME_TO_LEAVE_RATIO = os.getenv("DEFAULT_OVERTIME_TO_LEAVE_RATIO", "0.125")
LEAVE_CLAMP_INSUFFICIENT = bool(int(os.getenv("LEAVE_CLAMP_INSUFFICIENT", "1")))

MORNING_START = os.getenv("MORNING_START", "08:00:00")
MORNING_END = os.getenv("MORNING_END", "12:00:00")
AFTERNOON_START = os.getenv("AFTERNOON_START", "13:00:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
