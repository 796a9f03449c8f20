from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.exceptions import StorageIOError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Tuple[sqlite3.Connection, sqlite3.Cursor]]:
    """Yield ``(conn, cursor)``; commit on success, roll back on error.

    sqlite3 failures surface as ``StorageIOError``.
    """
    try:
        conn = conn_factory.connect()
    except (sqlite3.Error, OSError) as exc:
        raise StorageIOError(f"cannot open database {conn_factory.path}: {exc}") from exc
    try:
        cur = conn.cursor()
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except sqlite3.Error as exc:
        conn.rollback()
        raise StorageIOError(f"database error: {exc}") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur: sqlite3.Cursor) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur: sqlite3.Cursor) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return [dict(r) for r in rows or []]
