from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, FrozenSet, Optional

from ..common.datetime_utils import hours_between
from ..core.enums import PunchField
from ..core.exceptions import InvalidTimeRange, ValidationError


def compute_total_hours(punch_in: Optional[datetime], punch_out: Optional[datetime]) -> Optional[float]:
    if punch_in is None or punch_out is None:
        return None
    return hours_between(punch_in, punch_out)


def validate_time_range(punch_in: Optional[datetime], punch_out: Optional[datetime]) -> None:
    if punch_in is not None and punch_out is not None and punch_out <= punch_in:
        raise InvalidTimeRange(
            f"punch out ({punch_out.isoformat()}) must be after punch in ({punch_in.isoformat()})"
        )


@dataclass(frozen=True)
class PunchRecord:
    """One logged work interval, possibly still open."""

    id: str
    date: date
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    notes: Optional[str] = None
    total_hours: Optional[float] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Derived value; whatever the caller passed is discarded.
        object.__setattr__(self, "total_hours", compute_total_hours(self.punch_in, self.punch_out))

    @property
    def is_open(self) -> bool:
        return self.punch_out is None

    @property
    def is_completed(self) -> bool:
        return self.punch_in is not None and self.punch_out is not None


@dataclass(frozen=True)
class NewPunch:
    """A punch record before the store assigns its id."""

    date: date
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    notes: Optional[str] = None

    def with_id(self, record_id: str) -> PunchRecord:
        return PunchRecord(
            id=record_id,
            date=self.date,
            punch_in=self.punch_in,
            punch_out=self.punch_out,
            notes=self.notes,
        )


@dataclass(frozen=True)
class PunchUpdate:
    """Partial edit with an explicit field mask.

    Only fields named in ``fields`` are applied; naming a field with value
    ``None`` clears it.
    """

    fields: FrozenSet[PunchField]
    date: Optional[date] = None
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if PunchField.DATE in self.fields and self.date is None:
            raise ValidationError("date cannot be cleared")

    @classmethod
    def of(cls, **changes: Any) -> "PunchUpdate":
        names = set()
        for name in changes:
            try:
                names.add(PunchField(name))
            except ValueError:
                raise ValidationError(f"Unknown punch field: {name}")
        return cls(fields=frozenset(names), **changes)

    def __contains__(self, item: PunchField) -> bool:
        return item in self.fields

    def apply(self, record: PunchRecord) -> PunchRecord:
        changes = {f.value: getattr(self, f.value) for f in self.fields}
        # replace() re-runs __post_init__, so total_hours follows the merged timestamps
        return replace(record, **changes)
