from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Awaitable, Callable, Optional, Sequence, Tuple, TypeVar

from ..common.datetime_utils import Clock, now_local
from ..core.constants import STATS_PRECISION
from ..core.enums import PunchField, SessionState
from ..core.exceptions import InvalidTransition, NoActiveSession
from ..records.model import NewPunch, PunchRecord, PunchUpdate
from ..records.repository import PunchRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TodaySummary:
    """Read model for "am I working, and how much today"."""

    today: date
    state: SessionState
    current_record_id: Optional[str]
    current_punch_in_time: Optional[datetime]
    records: Sequence[PunchRecord]
    total_hours: float

    @property
    def is_working(self) -> bool:
        return self.state is SessionState.WORKING


class SessionStateMachine:
    """IDLE/WORKING state backed by the record store.

    State only advances after the store write succeeded, and every transition
    ends with a re-query of today's records so the cached total always comes
    from durable data. Transitions hold ``lock`` from the state check until
    the state change, so overlapping calls see each other's result.
    """

    def __init__(self, records: PunchRepository, *, clock: Clock = now_local):
        self._records = records
        self._clock = clock
        self.lock = asyncio.Lock()
        self._state = SessionState.IDLE
        self._current_record_id: Optional[str] = None
        self._current_punch_in_time: Optional[datetime] = None
        self._today: date = clock().date()
        self._today_records: Sequence[PunchRecord] = ()
        self._today_total_hours = 0.0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_working(self) -> bool:
        return self._state is SessionState.WORKING

    @property
    def current_record_id(self) -> Optional[str]:
        return self._current_record_id

    @property
    def current_punch_in_time(self) -> Optional[datetime]:
        return self._current_punch_in_time

    def summary(self) -> TodaySummary:
        return TodaySummary(
            today=self._today,
            state=self._state,
            current_record_id=self._current_record_id,
            current_punch_in_time=self._current_punch_in_time,
            records=tuple(self._today_records),
            total_hours=self._today_total_hours,
        )

    def _enter_working(self, record_id: str, punch_in_time: Optional[datetime]) -> None:
        self._state = SessionState.WORKING
        self._current_record_id = record_id
        self._current_punch_in_time = punch_in_time

    def _enter_idle(self) -> None:
        self._state = SessionState.IDLE
        self._current_record_id = None
        self._current_punch_in_time = None

    async def _scan_today(self) -> None:
        self._today = self._clock().date()
        todays = await self._records.query_by_date(self._today)
        open_records = [r for r in todays if r.is_open]
        if len(open_records) == 1:
            self._enter_working(open_records[0].id, open_records[0].punch_in)
        else:
            if len(open_records) > 1:
                logger.warning(
                    "%d open sessions found for %s; staying idle", len(open_records), self._today
                )
            self._enter_idle()
        self._set_today(todays)

    def _set_today(self, records: Sequence[PunchRecord]) -> None:
        self._today_records = tuple(records)
        total = sum(r.total_hours for r in records if r.total_hours is not None)
        self._today_total_hours = round(total, STATS_PRECISION)

    async def initialize(self) -> TodaySummary:
        async with self.lock:
            await self._scan_today()
        logger.info("session state initialized: %s (%s)", self._state.value, self._today)
        return self.summary()

    async def refresh_today(self) -> TodaySummary:
        self._today = self._clock().date()
        self._set_today(await self._records.query_by_date(self._today))
        return self.summary()

    async def punch_in(self, notes: Optional[str] = None) -> TodaySummary:
        async with self.lock:
            if self.is_working:
                raise InvalidTransition("already punched in")

            now = self._clock()
            record_id = await self._records.create(
                NewPunch(date=now.date(), punch_in=now, punch_out=None, notes=notes)
            )
            self._enter_working(record_id, now)
            logger.info("punched in at %s (record %s)", now.isoformat(), record_id)
            return await self.refresh_today()

    async def punch_out(self, notes: Optional[str] = None) -> TodaySummary:
        async with self.lock:
            if not self.is_working:
                raise InvalidTransition("not punched in")

            record_id = self._current_record_id
            current = await self._records.get_by_id(record_id) if record_id else None
            if current is None or not current.is_open:
                raise NoActiveSession(f"no open punch record matches session {record_id}")

            now = self._clock()
            changes = {PunchField.PUNCH_OUT.value: now}
            if notes is not None:
                changes[PunchField.NOTES.value] = notes
            updated = await self._records.update(record_id, PunchUpdate.of(**changes))
            self._enter_idle()
            logger.info(
                "punched out at %s (record %s, %.2fh)", now.isoformat(), record_id, updated.total_hours or 0.0
            )
            return await self.refresh_today()

    async def _reconcile(self) -> TodaySummary:
        if self.is_working and self._current_record_id:
            current = await self._records.get_by_id(self._current_record_id)
            if current is not None and current.is_open:
                self._current_punch_in_time = current.punch_in
                return await self.refresh_today()
        await self._scan_today()
        return self.summary()

    async def reconcile(self) -> TodaySummary:
        """Re-derive state from the store after edits made outside punch in/out."""
        async with self.lock:
            return await self._reconcile()

    async def apply_edit(self, write: Callable[[], Awaitable[T]]) -> Tuple[T, TodaySummary]:
        """Run a manual store edit and reconcile, with no transition in between."""
        async with self.lock:
            result = await write()
            return result, await self._reconcile()

    async def reset(self) -> None:
        async with self.lock:
            self._enter_idle()
            self._today = self._clock().date()
            self._set_today(())
