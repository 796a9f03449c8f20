"""Session snapshot: a warm-start hint persisted next to the record set.

The snapshot is read once at start-up and is always overridden by a fresh
scan of the record store.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_iso_date, format_timestamp, parse_iso_date, parse_timestamp
from ..core.constants import DEFAULT_SNAPSHOT_KEY, SNAPSHOT_VERSION
from ..storage.medium import KeyValueMedium

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    is_working: bool
    current_punch_in_time: Optional[datetime]
    current_record_id: Optional[str]
    today_date: date
    version: int = SNAPSHOT_VERSION

    def to_json(self) -> str:
        return json.dumps(
            {
                "version": self.version,
                "isWorking": self.is_working,
                "currentPunchInTime": format_timestamp(self.current_punch_in_time),
                "currentRecordId": self.current_record_id,
                "todayDate": format_iso_date(self.today_date),
            }
        )

    @classmethod
    def from_json(cls, payload: str) -> "SessionSnapshot":
        """Raises ``ValueError``/``KeyError``/``TypeError`` on a malformed document."""
        data = json.loads(payload)
        version = int(data["version"])
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version {version}")
        punch_in = data.get("currentPunchInTime")
        record_id = data.get("currentRecordId")
        return cls(
            is_working=bool(data["isWorking"]),
            current_punch_in_time=parse_timestamp(punch_in) if punch_in else None,
            current_record_id=str(record_id) if record_id is not None else None,
            today_date=parse_iso_date(data["todayDate"]),
            version=version,
        )


class SnapshotStore:
    """Separate durable slot for the session snapshot."""

    def __init__(self, medium: KeyValueMedium, *, key: str = DEFAULT_SNAPSHOT_KEY):
        self._medium = medium
        self._key = key

    async def load(self) -> Optional[SessionSnapshot]:
        payload = await self._medium.get_item(self._key)
        if payload is None:
            return None
        try:
            return SessionSnapshot.from_json(payload)
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("ignoring unreadable session snapshot: %s", exc)
            return None

    async def save(self, snapshot: SessionSnapshot) -> None:
        await self._medium.set_item(self._key, snapshot.to_json())

    async def clear(self) -> None:
        await self._medium.remove_item(self._key)
