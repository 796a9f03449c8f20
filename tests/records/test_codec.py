from datetime import date, datetime, timezone

import pytest

from punch_log.core.exceptions import ValidationError
from punch_log.records.codec import loads_records, record_from_dict


def test_total_hours_in_payload_is_recomputed():
    [rec] = loads_records(
        '[{"id": "7", "date": "2026-01-14", "punchIn": "2026-01-14T09:00:00",'
        ' "punchOut": "2026-01-14T10:30:00", "totalHours": 42}]'
    )
    assert rec.total_hours == 1.5


def test_numeric_ids_become_strings_and_missing_ids_are_assigned():
    rec = record_from_dict({"id": 1712345678901, "date": "2026-01-14"})
    assert rec.id == "1712345678901"

    with pytest.raises(ValidationError):
        record_from_dict({"date": "2026-01-14"})
    assigned = record_from_dict({"date": "2026-01-14"}, assign_missing_id=True)
    assert assigned.id


def test_aware_timestamps_are_converted_to_local_wall_clock():
    rec = record_from_dict({"id": "1", "date": "2026-01-14", "punchIn": "2026-01-14T09:00:00Z"})
    expected = datetime(2026, 1, 14, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert rec.punch_in == expected


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"id": "1"}',
        '[{"id": "1"}]',
        '[{"id": "1", "date": "14/01/2026"}]',
        '[{"id": "1", "date": "2026-01-14", "punchIn": "yesterday"}]',
        '[{"id": "1", "date": "2026-01-14", "notes": 5}]',
    ],
)
def test_invalid_payloads_raise_validation_error(payload):
    with pytest.raises(ValidationError):
        loads_records(payload)


def test_date_is_kept_as_grouping_key():
    [rec] = loads_records('[{"id": "1", "date": "2026-01-13", "punchIn": "2026-01-14T01:00:00"}]')
    assert rec.date == date(2026, 1, 13)
