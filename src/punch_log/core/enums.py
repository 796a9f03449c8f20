from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """Whether a work session is currently open."""

    IDLE = "IDLE"
    WORKING = "WORKING"


class ChartGranularity(str, Enum):
    """Label format of a chart series."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class PresetRange(str, Enum):
    """Convenience ranges computed relative to today."""

    THIS_WEEK = "this_week"
    LAST_TWO_WEEKS = "last_two_weeks"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"


class PunchField(str, Enum):
    """Editable fields of a punch record."""

    DATE = "date"
    PUNCH_IN = "punch_in"
    PUNCH_OUT = "punch_out"
    NOTES = "notes"
