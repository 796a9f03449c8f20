from datetime import date, datetime, timedelta

from punch_log.core.enums import ChartGranularity
from punch_log.records.model import PunchRecord
from punch_log.stats.engine import AggregationEngine
from punch_log.stats.model import ChartPoint, TimeStats
from punch_log.stats.ranges import DateRange


def _rec(rid: str, day: date, start_h: int, hours: float) -> PunchRecord:
    start = datetime.combine(day, datetime.min.time()) + timedelta(hours=start_h)
    return PunchRecord(id=rid, date=day, punch_in=start, punch_out=start + timedelta(hours=hours))


def test_empty_range_returns_zero_stats():
    stats = AggregationEngine().get_stats([], DateRange(date(2026, 1, 1), date(2026, 1, 31)))
    assert stats == TimeStats(total_hours=0, days_worked=0, average_hours_per_day=0)


def test_scenario_b_two_records_same_day():
    day = date(2026, 1, 14)
    records = [_rec("1", day, 8, 4), _rec("2", day, 13, 3)]
    stats = AggregationEngine().get_stats(records, DateRange(day, day))
    assert stats == TimeStats(total_hours=7, days_worked=1, average_hours_per_day=7)


def test_scenario_e_two_days_in_a_week():
    records = [_rec("1", date(2026, 1, 7), 9, 5), _rec("2", date(2026, 1, 9), 9, 3)]
    stats = AggregationEngine().get_stats(records, DateRange(date(2026, 1, 5), date(2026, 1, 11)))
    assert stats.days_worked == 2
    assert stats.total_hours == 8
    assert stats.average_hours_per_day == 4


def test_open_and_out_of_range_records_do_not_count():
    day = date(2026, 1, 14)
    records = [
        _rec("1", day, 9, 2),
        PunchRecord(id="2", date=day, punch_in=datetime(2026, 1, 14, 12, 0)),
        PunchRecord(id="3", date=day, punch_out=datetime(2026, 1, 14, 12, 0)),
        _rec("4", date(2026, 1, 20), 9, 8),
    ]
    stats = AggregationEngine().get_stats(records, DateRange(day, day))
    assert stats == TimeStats(total_hours=2, days_worked=1, average_hours_per_day=2)


def test_stats_are_rounded_to_two_decimals():
    day = date(2026, 1, 14)
    records = [
        PunchRecord(id="1", date=day, punch_in=datetime(2026, 1, 14, 9, 0), punch_out=datetime(2026, 1, 14, 9, 20)),
        PunchRecord(id="2", date=date(2026, 1, 15), punch_in=datetime(2026, 1, 15, 9, 0), punch_out=datetime(2026, 1, 15, 9, 20)),
        PunchRecord(id="3", date=date(2026, 1, 16), punch_in=datetime(2026, 1, 16, 9, 0), punch_out=datetime(2026, 1, 16, 9, 20)),
    ]
    stats = AggregationEngine().get_stats(records, DateRange(day, date(2026, 1, 16)))
    assert stats.total_hours == 1.0
    assert stats.average_hours_per_day == 0.33


def test_week_chart_is_zero_filled_and_summed():
    records = [
        _rec("1", date(2026, 1, 13), 8, 4),
        _rec("2", date(2026, 1, 13), 13, 3.5),
        _rec("3", date(2026, 1, 16), 9, 6),
    ]
    series = AggregationEngine().get_chart_series(
        records, DateRange(date(2026, 1, 12), date(2026, 1, 18)), ChartGranularity.WEEK
    )
    assert series == [
        ChartPoint("Mon", 0),
        ChartPoint("Tue", 7.5),
        ChartPoint("Wed", 0),
        ChartPoint("Thu", 0),
        ChartPoint("Fri", 6),
        ChartPoint("Sat", 0),
        ChartPoint("Sun", 0),
    ]


def test_month_and_year_labels():
    engine = AggregationEngine()
    month = engine.get_chart_series([], DateRange(date(2026, 2, 1), date(2026, 2, 28)), ChartGranularity.MONTH)
    assert [p.label for p in month] == [str(d) for d in range(1, 29)]

    year = engine.get_chart_series([], DateRange(date(2026, 1, 31), date(2026, 2, 1)), ChartGranularity.YEAR)
    assert [p.label for p in year] == ["Jan", "Feb"]


def test_monthly_totals_has_twelve_buckets():
    records = [_rec("1", date(2026, 3, 2), 9, 8), _rec("2", date(2026, 3, 3), 9, 7.25), _rec("3", date(2025, 3, 3), 9, 7)]
    totals = AggregationEngine().get_monthly_totals(records, 2026)
    assert len(totals) == 12
    assert totals[2] == ChartPoint("Mar", 15.25)
    assert sum(p.hours for p in totals) == 15.25
