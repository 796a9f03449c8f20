"""Record store keeping the whole record set as one JSON array.

Every mutation reads the full snapshot, changes it and rewrites it, so
mutations are serialised with an ``asyncio.Lock``; two interleaved
read-modify-write cycles would otherwise drop one of the changes.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, List, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_RECORDS_KEY
from ..core.exceptions import NotFound, StorageIOError, ValidationError
from ..storage.medium import KeyValueMedium
from .codec import dumps_records, loads_records, new_record_id
from .model import NewPunch, PunchRecord, PunchUpdate, validate_time_range
from .repository import PunchRepository, sort_by_date_and_punch_in, sort_by_punch_in

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValuePunchRepository(PunchRepository):
    def __init__(
        self,
        medium: KeyValueMedium,
        *,
        key: str = DEFAULT_RECORDS_KEY,
        id_factory: Callable[[], str] = new_record_id,
    ):
        self._medium = medium
        self._key = key
        self._new_id = id_factory
        self._lock = asyncio.Lock()

    async def _load(self) -> List[PunchRecord]:
        payload = await self._medium.get_item(self._key)
        if payload is None:
            return []
        try:
            return loads_records(payload)
        except ValidationError as exc:
            raise StorageIOError(f"stored record set under {self._key!r} is corrupt: {exc}") from exc

    async def _save(self, records: Sequence[PunchRecord]) -> None:
        await self._medium.set_item(self._key, dumps_records(records))

    async def _mutate(self, change: Callable[[List[PunchRecord]], T]) -> T:
        async with self._lock:
            records = await self._load()
            result = change(records)
            await self._save(records)
            return result

    async def create(self, entry: NewPunch) -> str:
        record = entry.with_id(self._new_id())

        def _append(records: List[PunchRecord]) -> str:
            records.append(record)
            return record.id

        record_id = await self._mutate(_append)
        logger.info("punch record %s created for %s", record_id, entry.date)
        return record_id

    async def update(self, record_id: str, update: PunchUpdate) -> PunchRecord:
        def _merge(records: List[PunchRecord]) -> PunchRecord:
            for i, existing in enumerate(records):
                if existing.id == record_id:
                    merged = update.apply(existing)
                    validate_time_range(merged.punch_in, merged.punch_out)
                    records[i] = merged
                    return records[i]
            raise NotFound(f"punch record {record_id} not found")

        updated = await self._mutate(_merge)
        logger.info("punch record %s updated (%s)", record_id, ", ".join(sorted(f.value for f in update.fields)))
        return updated

    async def delete(self, record_id: str) -> None:
        def _remove(records: List[PunchRecord]) -> None:
            for i, existing in enumerate(records):
                if existing.id == record_id:
                    del records[i]
                    return
            raise NotFound(f"punch record {record_id} not found")

        await self._mutate(_remove)
        logger.info("punch record %s deleted", record_id)

    async def get_by_id(self, record_id: str) -> Optional[PunchRecord]:
        for record in await self._load():
            if record.id == record_id:
                return record
        return None

    async def query_by_date(self, day: date) -> Sequence[PunchRecord]:
        records = [r for r in await self._load() if r.date == day]
        logger.debug("fetched %d records for %s", len(records), day)
        return sort_by_punch_in(records)

    async def query_by_range(self, start: date, end: date) -> Sequence[PunchRecord]:
        records = [r for r in await self._load() if start <= r.date <= end]
        logger.debug("fetched %d records for range %s to %s", len(records), start, end)
        return sort_by_date_and_punch_in(records)

    async def query_all(self) -> Sequence[PunchRecord]:
        return sort_by_date_and_punch_in(await self._load(), descending=True)

    async def count(self) -> int:
        return len(await self._load())

    async def clear(self) -> None:
        async with self._lock:
            await self._medium.remove_item(self._key)
        logger.info("all punch records cleared")

    async def bulk_upsert(self, records: Sequence[PunchRecord], *, replace: bool = False) -> None:
        def _upsert(existing: List[PunchRecord]) -> None:
            incoming = {r.id: r for r in records}
            kept = [] if replace else [r for r in existing if r.id not in incoming]
            existing[:] = kept + list(incoming.values())

        await self._mutate(_upsert)
        logger.info("%d punch records written in bulk (replace=%s)", len(records), replace)
