from datetime import date

import pytest

from punch_log.core.enums import PresetRange
from punch_log.core.exceptions import ValidationError
from punch_log.stats.ranges import DateRange, preset_range


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2026, 1, 14), DateRange(date(2026, 1, 12), date(2026, 1, 18))),  # Wednesday
        (date(2026, 1, 12), DateRange(date(2026, 1, 12), date(2026, 1, 18))),  # Monday
        (date(2026, 1, 18), DateRange(date(2026, 1, 12), date(2026, 1, 18))),  # Sunday
    ],
)
def test_this_week_is_monday_to_sunday(today, expected):
    assert preset_range(PresetRange.THIS_WEEK, today) == expected


def test_other_presets():
    today = date(2026, 3, 5)
    assert preset_range(PresetRange.LAST_TWO_WEEKS, today) == DateRange(date(2026, 2, 20), today)
    assert preset_range(PresetRange.THIS_MONTH, today) == DateRange(date(2026, 3, 1), today)
    assert preset_range(PresetRange.THIS_YEAR, today) == DateRange(date(2026, 1, 1), today)


def test_range_days_are_inclusive():
    rng = DateRange(date(2026, 2, 27), date(2026, 3, 2))
    assert [d.day for d in rng.days()] == [27, 28, 1, 2]
    assert date(2026, 3, 2) in rng
    assert date(2026, 3, 3) not in rng


def test_reversed_range_is_rejected():
    with pytest.raises(ValidationError):
        DateRange(date(2026, 3, 2), date(2026, 3, 1))
