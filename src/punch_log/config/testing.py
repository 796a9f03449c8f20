import os

SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"
DATA_DIR = os.getenv("PUNCH_LOG_DATA_DIR", "")
SQLITE_FILE = os.getenv("PUNCH_LOG_SQLITE_FILE", "punch_log_test.sqlite3")

RECORDS_KEY = "punch_log:records"
SNAPSHOT_KEY = "punch_log:session"

TIMER_INTERVAL_SECONDS = 1.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
