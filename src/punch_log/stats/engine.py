"""Aggregation engine.

Pure functions over a record set: nothing here touches storage or keeps
state between calls, so results are never stale.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List

from ..core.constants import MONTH_LABELS, STATS_PRECISION, WEEKDAY_LABELS
from ..core.enums import ChartGranularity
from ..records.model import PunchRecord
from .model import ChartPoint, TimeStats
from .ranges import DateRange


def _round(value: float) -> float:
    return round(value, STATS_PRECISION)


def day_label(day: date, granularity: ChartGranularity) -> str:
    if granularity is ChartGranularity.WEEK:
        return WEEKDAY_LABELS[day.weekday()]
    if granularity is ChartGranularity.MONTH:
        return str(day.day)
    return MONTH_LABELS[day.month - 1]


class AggregationEngine:
    @staticmethod
    def hours_by_day(records: Iterable[PunchRecord], date_range: DateRange) -> Dict[date, float]:
        """Sum of completed hours per ``date`` inside the range."""
        totals: Dict[date, float] = defaultdict(float)
        for r in records:
            if r.is_completed and r.date in date_range:
                totals[r.date] += r.total_hours
        return dict(totals)

    def get_stats(self, records: Iterable[PunchRecord], date_range: DateRange) -> TimeStats:
        totals = self.hours_by_day(records, date_range)
        total_hours = sum(totals.values())
        days_worked = len(totals)
        average = total_hours / days_worked if days_worked else 0.0
        return TimeStats(
            total_hours=_round(total_hours),
            days_worked=days_worked,
            average_hours_per_day=_round(average),
        )

    def get_chart_series(
        self,
        records: Iterable[PunchRecord],
        date_range: DateRange,
        granularity: ChartGranularity = ChartGranularity.WEEK,
    ) -> List[ChartPoint]:
        totals = self.hours_by_day(records, date_range)
        return [
            ChartPoint(label=day_label(day, granularity), hours=_round(totals.get(day, 0.0)))
            for day in date_range.days()
        ]

    def get_monthly_totals(self, records: Iterable[PunchRecord], year: int) -> List[ChartPoint]:
        """Twelve points, one per month of ``year``."""
        totals = self.hours_by_day(records, DateRange(date(year, 1, 1), date(year, 12, 31)))
        by_month = [0.0] * 12
        for day, hours in totals.items():
            by_month[day.month - 1] += hours
        return [ChartPoint(label=MONTH_LABELS[i], hours=_round(h)) for i, h in enumerate(by_month)]
