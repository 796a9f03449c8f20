from __future__ import annotations

import asyncio
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.sqlite_base import db_cursor, fetchone
from .medium import KeyValueMedium


class SQLiteKeyValueMedium(KeyValueMedium):
    """Slots stored in the ``kv`` table next to ``PunchLog``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def _get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM kv WHERE key=?", (key,))
            r = fetchone(cur)
            return r["value"] if r else None

    def _set(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO kv(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, value),
            )

    def _remove(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv WHERE key=?", (key,))
