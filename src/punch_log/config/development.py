import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# file | sqlite | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "file")
DATA_DIR = os.getenv("PUNCH_LOG_DATA_DIR", os.path.join(os.getcwd(), "data"))
SQLITE_FILE = os.getenv("PUNCH_LOG_SQLITE_FILE", os.path.join(DATA_DIR, "punch_log.sqlite3"))

RECORDS_KEY = os.getenv("RECORDS_KEY", "punch_log:records")
SNAPSHOT_KEY = os.getenv("SNAPSHOT_KEY", "punch_log:session")

TIMER_INTERVAL_SECONDS = float(os.getenv("TIMER_INTERVAL_SECONDS", "1.0"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
