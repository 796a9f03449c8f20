"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_RECORDS_KEY = "punch_log:records"
DEFAULT_SNAPSHOT_KEY = "punch_log:session"
SNAPSHOT_VERSION = 1
DEFAULT_TIMER_INTERVAL_SECONDS = 1.0
STATS_PRECISION = 2
SECONDS_PER_HOUR = 3600

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
