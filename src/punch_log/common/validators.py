from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_timestamp


def require_iso_date(value: object, field_name: str) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date (YYYY-MM-DD): {value!r}")


def optional_timestamp(value: object, field_name: str):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an ISO timestamp string")
    try:
        return parse_timestamp(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid ISO timestamp: {value!r}")


def optional_text(value: object, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value
