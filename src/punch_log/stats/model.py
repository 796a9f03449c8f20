from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeStats:
    """Totals over an aggregation range, rounded to two decimals."""

    total_hours: float
    days_worked: int
    average_hours_per_day: float

    def to_dict(self) -> dict:
        return {
            "totalHours": self.total_hours,
            "daysWorked": self.days_worked,
            "averageHoursPerDay": self.average_hours_per_day,
        }


@dataclass(frozen=True)
class ChartPoint:
    label: str
    hours: float

    def to_dict(self) -> dict:
        return {"label": self.label, "hours": self.hours}
