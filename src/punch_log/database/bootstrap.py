"""Schema bootstrap for the SQLite backend.

Both tables are created with ``CREATE TABLE IF NOT EXISTS`` so applying the
schema is idempotent.
"""
from __future__ import annotations

import logging
from typing import List

from .connection import DatabaseConnection
from .sqlite_base import db_cursor, fetchall

logger = logging.getLogger(__name__)

# --- Database Schema ---
# Table: PunchLog
#   id        text primary key  -- opaque record identifier
#   date      text              -- logical grouping day (YYYY-MM-DD)
#   punchIn   text              -- ISO timestamp, NULL if not set
#   punchOut  text              -- ISO timestamp, NULL while the session is open
#   notes     text
# Table: kv
#   key       text primary key  -- namespaced slot name
#   value     text              -- JSON document
SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS PunchLog (
        id TEXT PRIMARY KEY,
        date TEXT NOT NULL,
        punchIn TEXT,
        punchOut TEXT,
        notes TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_punchlog_date ON PunchLog(date, punchIn)",
    """
    CREATE TABLE IF NOT EXISTS kv (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    """,
)


def apply_schema(conn_factory: DatabaseConnection) -> None:
    with db_cursor(conn_factory) as (_, cur):
        for statement in SCHEMA:
            cur.execute(statement)
    logger.debug("schema ready at %s", conn_factory.path)


def list_tables(conn_factory: DatabaseConnection) -> List[str]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        return [r["name"] for r in fetchall(cur)]
