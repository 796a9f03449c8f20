import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORE_BACKEND = os.getenv("STORE_BACKEND", "sqlite")
DATA_DIR = os.getenv("PUNCH_LOG_DATA_DIR", os.path.join(os.path.expanduser("~"), ".local", "share", "punch_log"))
SQLITE_FILE = os.getenv("PUNCH_LOG_SQLITE_FILE", os.path.join(DATA_DIR, "punch_log.sqlite3"))

RECORDS_KEY = os.getenv("RECORDS_KEY", "punch_log:records")
SNAPSHOT_KEY = os.getenv("SNAPSHOT_KEY", "punch_log:session")

TIMER_INTERVAL_SECONDS = float(os.getenv("TIMER_INTERVAL_SECONDS", "1.0"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
