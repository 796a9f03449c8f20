"""JSON wire form of punch records.

The same camelCase document is used for the persisted record array and for
the export/import pair::

    {"id": "...", "date": "2026-01-31", "punchIn": "2026-01-31T09:00:00",
     "punchOut": "2026-01-31T17:30:00", "notes": null, "totalHours": 8.5}

``totalHours`` is written for consumers but never read back: it is always
recomputed from the two timestamps.
"""
from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Iterable, List

from ..common.datetime_utils import format_iso_date, format_timestamp
from ..common.validators import optional_text, optional_timestamp, require_iso_date
from ..core.exceptions import ValidationError
from .model import PunchRecord


def new_record_id() -> str:
    return uuid.uuid4().hex


def record_to_dict(record: PunchRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "date": format_iso_date(record.date),
        "punchIn": format_timestamp(record.punch_in),
        "punchOut": format_timestamp(record.punch_out),
        "notes": record.notes,
        "totalHours": record.total_hours,
    }


def record_from_dict(data: Any, *, assign_missing_id: bool = False) -> PunchRecord:
    if not isinstance(data, dict):
        raise ValidationError("punch record must be a JSON object")

    record_id = data.get("id")
    if record_id is None or record_id == "":
        if not assign_missing_id:
            raise ValidationError("punch record is missing its id")
        record_id = new_record_id()
    elif isinstance(record_id, (int, str)) and not isinstance(record_id, bool):
        record_id = str(record_id)
    else:
        raise ValidationError(f"invalid record id: {record_id!r}")

    return PunchRecord(
        id=record_id,
        date=require_iso_date(data.get("date"), "date"),
        punch_in=optional_timestamp(data.get("punchIn"), "punchIn"),
        punch_out=optional_timestamp(data.get("punchOut"), "punchOut"),
        notes=optional_text(data.get("notes"), "notes"),
    )


def dumps_records(records: Iterable[PunchRecord], *, indent: int | None = None) -> str:
    return json.dumps([record_to_dict(r) for r in records], indent=indent, ensure_ascii=False)


def loads_records(payload: str, *, assign_missing_id: bool = False) -> List[PunchRecord]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"records payload is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValidationError("records payload must be a JSON array")
    return [record_from_dict(item, assign_missing_id=assign_missing_id) for item in data]
