from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .common.datetime_utils import Clock, now_local
from .coordinator.service import PunchCoordinator
from .core.constants import DEFAULT_RECORDS_KEY, DEFAULT_SNAPSHOT_KEY, DEFAULT_TIMER_INTERVAL_SECONDS
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .records.kv_repository import KeyValuePunchRepository
from .records.repository import PunchRepository
from .records.sqlite_repository import SQLitePunchRepository
from .session.snapshot import SnapshotStore
from .stats.engine import AggregationEngine
from .storage.file_medium import FileKeyValueMedium
from .storage.medium import KeyValueMedium, MemoryKeyValueMedium
from .storage.sqlite_medium import SQLiteKeyValueMedium


@dataclass(frozen=True)
class Container:
    medium: KeyValueMedium
    records_repo: PunchRepository
    snapshots: SnapshotStore
    engine: AggregationEngine
    coordinator: PunchCoordinator
    conn: Optional[DatabaseConnection] = None


def build_container(settings: Any, *, clock: Clock = now_local) -> Container:
    """Wire the store, snapshot slot and coordinator from a settings module."""
    backend = str(getattr(settings, "STORE_BACKEND", "file")).lower()
    records_key = getattr(settings, "RECORDS_KEY", DEFAULT_RECORDS_KEY)
    snapshot_key = getattr(settings, "SNAPSHOT_KEY", DEFAULT_SNAPSHOT_KEY)

    conn: Optional[DatabaseConnection] = None
    if backend == "memory":
        medium: KeyValueMedium = MemoryKeyValueMedium()
        records_repo: PunchRepository = KeyValuePunchRepository(medium, key=records_key)
    elif backend == "file":
        medium = FileKeyValueMedium(getattr(settings, "DATA_DIR"))
        records_repo = KeyValuePunchRepository(medium, key=records_key)
    elif backend == "sqlite":
        conn = DatabaseConnection(DBConfig(path=str(getattr(settings, "SQLITE_FILE"))))
        apply_schema(conn)
        medium = SQLiteKeyValueMedium(conn)
        records_repo = SQLitePunchRepository(conn)
    else:
        raise ValidationError(f"Unknown STORE_BACKEND: {backend!r}")

    snapshots = SnapshotStore(medium, key=snapshot_key)
    engine = AggregationEngine()
    coordinator = PunchCoordinator(
        records_repo,
        snapshots,
        engine,
        clock=clock,
        tick_interval=float(getattr(settings, "TIMER_INTERVAL_SECONDS", DEFAULT_TIMER_INTERVAL_SECONDS)),
    )

    return Container(
        medium=medium,
        records_repo=records_repo,
        snapshots=snapshots,
        engine=engine,
        coordinator=coordinator,
        conn=conn,
    )
