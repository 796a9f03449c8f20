from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional, Protocol, Sequence

from .model import NewPunch, PunchRecord, PunchUpdate


def _punch_in_key(record: PunchRecord) -> datetime:
    # Records without a punch in sort before any timestamp.
    return record.punch_in or datetime.min


def sort_by_punch_in(records: Iterable[PunchRecord]) -> List[PunchRecord]:
    return sorted(records, key=_punch_in_key)


def sort_by_date_and_punch_in(records: Iterable[PunchRecord], *, descending: bool = False) -> List[PunchRecord]:
    return sorted(records, key=lambda r: (r.date, _punch_in_key(r)), reverse=descending)


class PunchRepository(Protocol):
    """Durable CRUD over punch records.

    Implementations serialise their own mutations; the single open session
    rule is not enforced here.
    """

    async def create(self, entry: NewPunch) -> str:
        raise NotImplementedError

    async def update(self, record_id: str, update: PunchUpdate) -> PunchRecord:
        """Merge the masked fields; raises ``NotFound`` for an unknown id."""

        raise NotImplementedError

    async def delete(self, record_id: str) -> None:
        raise NotImplementedError

    async def get_by_id(self, record_id: str) -> Optional[PunchRecord]:
        raise NotImplementedError

    async def query_by_date(self, day: date) -> Sequence[PunchRecord]:
        raise NotImplementedError

    async def query_by_range(self, start: date, end: date) -> Sequence[PunchRecord]:
        raise NotImplementedError

    async def query_all(self) -> Sequence[PunchRecord]:
        raise NotImplementedError

    async def count(self) -> int:
        raise NotImplementedError

    async def clear(self) -> None:
        raise NotImplementedError

    async def bulk_upsert(self, records: Sequence[PunchRecord], *, replace: bool = False) -> None:
        """Insert or overwrite by id in one write; ``replace`` drops everything else first."""

        raise NotImplementedError
