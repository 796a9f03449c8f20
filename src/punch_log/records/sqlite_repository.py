from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from ..common.datetime_utils import format_iso_date, format_timestamp, parse_iso_date, parse_timestamp
from ..core.exceptions import NotFound
from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchall, fetchone
from .codec import new_record_id
from .model import NewPunch, PunchRecord, PunchUpdate, validate_time_range
from .repository import PunchRepository

logger = logging.getLogger(__name__)

_COLUMNS = "id, date, punchIn, punchOut, notes"


def _to_record(r: Dict[str, Any]) -> PunchRecord:
    return PunchRecord(
        id=str(r["id"]),
        date=parse_iso_date(r["date"]),
        punch_in=parse_timestamp(r["punchIn"]) if r.get("punchIn") else None,
        punch_out=parse_timestamp(r["punchOut"]) if r.get("punchOut") else None,
        notes=r.get("notes"),
    )


def _to_row(record: PunchRecord) -> tuple:
    return (
        record.id,
        format_iso_date(record.date),
        format_timestamp(record.punch_in),
        format_timestamp(record.punch_out),
        record.notes,
    )


class SQLitePunchRepository(PunchRepository):
    """Record store backed by the ``PunchLog`` table.

    ``totalHours`` is not a column; it is derived when rows are read.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, id_factory: Callable[[], str] = new_record_id):
        self._conn_factory = conn_factory
        self._new_id = id_factory
        self._lock = asyncio.Lock()

    async def _write(self, fn, *args):
        async with self._lock:
            return await asyncio.to_thread(fn, *args)

    async def create(self, entry: NewPunch) -> str:
        record = entry.with_id(self._new_id())
        await self._write(self._insert, record)
        logger.info("punch record %s created for %s", record.id, entry.date)
        return record.id

    def _insert(self, record: PunchRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO PunchLog({_COLUMNS}) VALUES(?,?,?,?,?)", _to_row(record))

    async def update(self, record_id: str, update: PunchUpdate) -> PunchRecord:
        updated = await self._write(self._merge, record_id, update)
        logger.info("punch record %s updated (%s)", record_id, ", ".join(sorted(f.value for f in update.fields)))
        return updated

    def _merge(self, record_id: str, update: PunchUpdate) -> PunchRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM PunchLog WHERE id=?", (record_id,))
            r = fetchone(cur)
            if not r:
                raise NotFound(f"punch record {record_id} not found")
            merged = update.apply(_to_record(r))
            validate_time_range(merged.punch_in, merged.punch_out)
            _, day, punch_in, punch_out, notes = _to_row(merged)
            cur.execute(
                "UPDATE PunchLog SET date=?, punchIn=?, punchOut=?, notes=? WHERE id=?",
                (day, punch_in, punch_out, notes, record_id),
            )
            return merged

    async def delete(self, record_id: str) -> None:
        await self._write(self._delete, record_id)
        logger.info("punch record %s deleted", record_id)

    def _delete(self, record_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM PunchLog WHERE id=?", (record_id,))
            if cur.rowcount == 0:
                raise NotFound(f"punch record {record_id} not found")

    async def get_by_id(self, record_id: str) -> Optional[PunchRecord]:
        rows = await asyncio.to_thread(self._select, "WHERE id=?", (record_id,))
        return rows[0] if rows else None

    async def query_by_date(self, day: date) -> Sequence[PunchRecord]:
        rows = await asyncio.to_thread(self._select, "WHERE date=? ORDER BY punchIn ASC", (format_iso_date(day),))
        logger.debug("fetched %d records for %s", len(rows), day)
        return rows

    async def query_by_range(self, start: date, end: date) -> Sequence[PunchRecord]:
        rows = await asyncio.to_thread(
            self._select,
            "WHERE date >= ? AND date <= ? ORDER BY date ASC, punchIn ASC",
            (format_iso_date(start), format_iso_date(end)),
        )
        logger.debug("fetched %d records for range %s to %s", len(rows), start, end)
        return rows

    async def query_all(self) -> Sequence[PunchRecord]:
        return await asyncio.to_thread(self._select, "ORDER BY date DESC, punchIn DESC", ())

    def _select(self, clause: str, params: tuple) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM PunchLog {clause}", params)
            return [_to_record(r) for r in fetchall(cur)]

    async def count(self) -> int:
        return await asyncio.to_thread(self._count)

    def _count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM PunchLog")
            return int(fetchone(cur)["total"])

    async def clear(self) -> None:
        await self._write(self._clear)
        logger.info("all punch records cleared")

    def _clear(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM PunchLog")

    async def bulk_upsert(self, records: Sequence[PunchRecord], *, replace: bool = False) -> None:
        await self._write(self._upsert, list(records), replace)
        logger.info("%d punch records written in bulk (replace=%s)", len(records), replace)

    def _upsert(self, records: Sequence[PunchRecord], replace: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if replace:
                cur.execute("DELETE FROM PunchLog")
            cur.executemany(
                f"INSERT OR REPLACE INTO PunchLog({_COLUMNS}) VALUES(?,?,?,?,?)",
                [_to_row(r) for r in records],
            )
