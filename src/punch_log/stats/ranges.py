from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from ..common.datetime_utils import format_iso_date
from ..core.enums import PresetRange
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DateRange:
    """Inclusive start/end pair of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError(f"range start {self.start} is after end {self.end}")

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def to_dict(self) -> dict:
        return {"start": format_iso_date(self.start), "end": format_iso_date(self.end)}


def preset_range(preset: PresetRange, today: date) -> DateRange:
    """Resolve a preset against ``today``; callers pass the current date every time."""
    if preset is PresetRange.THIS_WEEK:
        monday = today - timedelta(days=today.weekday())
        return DateRange(monday, monday + timedelta(days=6))
    if preset is PresetRange.LAST_TWO_WEEKS:
        return DateRange(today - timedelta(days=13), today)
    if preset is PresetRange.THIS_MONTH:
        return DateRange(today.replace(day=1), today)
    if preset is PresetRange.THIS_YEAR:
        return DateRange(date(today.year, 1, 1), today)
    raise ValidationError(f"Unknown range preset: {preset!r}")
