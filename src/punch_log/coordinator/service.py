from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Set, TypeVar, Union

from ..common.datetime_utils import Clock, now_local
from ..core.constants import DEFAULT_TIMER_INTERVAL_SECONDS
from ..core.enums import ChartGranularity, PresetRange
from ..core.exceptions import DomainError, NotFound, ValidationError
from ..records.codec import dumps_records, loads_records
from ..records.model import NewPunch, PunchRecord, PunchUpdate, validate_time_range
from ..records.repository import PunchRepository
from ..session.snapshot import SessionSnapshot, SnapshotStore
from ..session.state_machine import SessionStateMachine, TodaySummary
from ..session.timer import SessionTimer
from ..stats.engine import AggregationEngine
from ..stats.model import ChartPoint, TimeStats
from ..stats.ranges import DateRange, preset_range

logger = logging.getLogger(__name__)

RangeLike = Union[DateRange, PresetRange]
T = TypeVar("T")


@dataclass(frozen=True)
class DatabaseStats:
    total_entries: int
    total_hours: float

    def to_dict(self) -> dict:
        return {"totalEntries": self.total_entries, "totalHours": self.total_hours}


class PunchCoordinator:
    """Facade used by every outside caller (UI, reports, settings).

    Writes flow coordinator -> state machine -> store; reads flow back the
    other way. The session snapshot is only a warm-start hint and never wins
    over what the store says.
    """

    def __init__(
        self,
        records: PunchRepository,
        snapshots: SnapshotStore,
        engine: Optional[AggregationEngine] = None,
        *,
        clock: Clock = now_local,
        monotonic: Callable[[], float] = time.monotonic,
        on_tick: Optional[Callable[[int], None]] = None,
        tick_interval: float = DEFAULT_TIMER_INTERVAL_SECONDS,
    ):
        self._records = records
        self._snapshots = snapshots
        self._engine = engine or AggregationEngine()
        self._clock = clock
        self._machine = SessionStateMachine(records, clock=clock)
        self._timer = SessionTimer(clock=clock, monotonic=monotonic, on_tick=on_tick, interval=tick_interval)
        self._timer_anchor: Optional[datetime] = None
        self.recovered_snapshot: Optional[SessionSnapshot] = None

    # --- session state ---
    @property
    def is_working(self) -> bool:
        return self._machine.is_working

    @property
    def current_punch_in_time(self) -> Optional[datetime]:
        return self._machine.current_punch_in_time

    @property
    def current_record_id(self) -> Optional[str]:
        return self._machine.current_record_id

    def today(self) -> date:
        return self._clock().date()

    def elapsed_seconds(self) -> int:
        return self._timer.elapsed_seconds()

    def _sync_timer(self) -> None:
        punch_in_time = self._machine.current_punch_in_time
        if self._machine.is_working and punch_in_time is not None:
            if not self._timer.running or self._timer_anchor != punch_in_time:
                self._timer.start(punch_in_time)
                self._timer_anchor = punch_in_time
        else:
            self._timer.stop()
            self._timer_anchor = None

    async def _persist_snapshot(self, summary: TodaySummary) -> None:
        snapshot = SessionSnapshot(
            is_working=summary.is_working,
            current_punch_in_time=summary.current_punch_in_time,
            current_record_id=summary.current_record_id,
            today_date=summary.today,
        )
        try:
            await self._snapshots.save(snapshot)
        except DomainError:
            # The transition is already durable in the record store.
            logger.warning("session snapshot not saved", exc_info=True)

    async def _after_transition(self, summary: TodaySummary) -> TodaySummary:
        self._sync_timer()
        await self._persist_snapshot(summary)
        return summary

    async def initialize(self) -> TodaySummary:
        self.recovered_snapshot = await self._snapshots.load()
        summary = await self._machine.initialize()

        hint = self.recovered_snapshot
        if hint is not None and (
            hint.is_working != summary.is_working or hint.current_record_id != summary.current_record_id
        ):
            logger.warning(
                "session snapshot (working=%s, record=%s) overridden by record store (working=%s, record=%s)",
                hint.is_working,
                hint.current_record_id,
                summary.is_working,
                summary.current_record_id,
            )
        return await self._after_transition(summary)

    async def punch_in(self, notes: Optional[str] = None) -> TodaySummary:
        return await self._after_transition(await self._machine.punch_in(notes))

    async def punch_out(self, notes: Optional[str] = None) -> TodaySummary:
        return await self._after_transition(await self._machine.punch_out(notes))

    async def refresh_today(self) -> TodaySummary:
        return await self._machine.refresh_today()

    async def reset_state(self) -> None:
        """Forget the in-memory session; the record store is left untouched."""
        await self._machine.reset()
        await self._after_transition(self._machine.summary())
        logger.info("session state reset")

    async def stale_open_sessions(self) -> List[PunchRecord]:
        """Open records dated before today, which the start-up scan does not pick up."""
        today = self.today()
        return [r for r in await self._records.query_all() if r.is_open and r.date < today]

    # --- records ---
    async def query_day(self, day: date) -> Sequence[PunchRecord]:
        return await self._records.query_by_date(day)

    async def query_range(self, start: date, end: date) -> Sequence[PunchRecord]:
        date_range = DateRange(start, end)
        return await self._records.query_by_range(date_range.start, date_range.end)

    async def query_all(self) -> Sequence[PunchRecord]:
        return await self._records.query_all()

    async def get_record(self, record_id: str) -> Optional[PunchRecord]:
        return await self._records.get_by_id(record_id)

    async def add_record(self, entry: NewPunch) -> PunchRecord:
        """Manual "add entry": a closed record with both timestamps."""
        if entry.punch_in is None or entry.punch_out is None:
            raise ValidationError("a manual entry needs both punch in and punch out")
        validate_time_range(entry.punch_in, entry.punch_out)

        record_id = await self._edit(lambda: self._records.create(entry))
        return entry.with_id(record_id)

    async def update_record(self, record_id: str, update: PunchUpdate) -> PunchRecord:
        async def write() -> PunchRecord:
            current = await self._records.get_by_id(record_id)
            if current is None:
                raise NotFound(f"punch record {record_id} not found")
            merged = update.apply(current)
            validate_time_range(merged.punch_in, merged.punch_out)
            if merged.is_open and not current.is_open:
                await self._ensure_no_open_session(excluding={record_id})
            return await self._records.update(record_id, update)

        return await self._edit(write)

    async def delete_record(self, record_id: str) -> None:
        await self._edit(lambda: self._records.delete(record_id))

    async def clear_all(self) -> None:
        await self._edit(self._records.clear)
        logger.info("all data cleared")

    async def _ensure_no_open_session(self, *, excluding: Set[str]) -> None:
        others = [r.id for r in await self._records.query_all() if r.is_open and r.id not in excluding]
        if others:
            raise ValidationError(f"session {others[0]} is still open; close it before opening another")

    async def _edit(self, write: Callable[[], Awaitable[T]]) -> T:
        was_working = self._machine.is_working
        result, summary = await self._machine.apply_edit(write)
        if was_working != summary.is_working:
            logger.info("session state changed to %s after a manual edit", summary.state.value)
        await self._after_transition(summary)
        return result

    # --- statistics ---
    def resolve_range(self, value: RangeLike) -> DateRange:
        if isinstance(value, PresetRange):
            return preset_range(value, self.today())
        return value

    async def get_stats(self, value: RangeLike) -> TimeStats:
        date_range = self.resolve_range(value)
        records = await self._records.query_by_range(date_range.start, date_range.end)
        return self._engine.get_stats(records, date_range)

    async def get_chart_series(
        self, value: RangeLike, granularity: ChartGranularity = ChartGranularity.WEEK
    ) -> List[ChartPoint]:
        date_range = self.resolve_range(value)
        records = await self._records.query_by_range(date_range.start, date_range.end)
        return self._engine.get_chart_series(records, date_range, granularity)

    async def get_monthly_totals(self, year: Optional[int] = None) -> List[ChartPoint]:
        year = year or self.today().year
        records = await self._records.query_by_range(date(year, 1, 1), date(year, 12, 31))
        return self._engine.get_monthly_totals(records, year)

    async def get_all_preset_stats(self) -> Dict[PresetRange, TimeStats]:
        return {preset: await self.get_stats(preset) for preset in PresetRange}

    async def database_stats(self) -> DatabaseStats:
        records = await self._records.query_all()
        total = sum(r.total_hours for r in records if r.total_hours is not None)
        return DatabaseStats(total_entries=len(records), total_hours=round(total, 2))

    # --- portability ---
    async def export_records(self) -> str:
        records = await self._records.query_all()
        logger.info("exporting %d punch records", len(records))
        return dumps_records(records, indent=2)

    async def import_records(self, payload: str, *, replace: bool = False) -> int:
        records = loads_records(payload, assign_missing_id=True)

        ids = [r.id for r in records]
        if len(ids) != len(set(ids)):
            raise ValidationError("import payload contains duplicate record ids")
        for r in records:
            validate_time_range(r.punch_in, r.punch_out)

        open_ids = {r.id for r in records if r.is_open}
        if len(open_ids) > 1:
            raise ValidationError("import payload contains more than one open session")

        async def write() -> None:
            if open_ids and not replace:
                await self._ensure_no_open_session(excluding=open_ids)
            await self._records.bulk_upsert(records, replace=replace)

        await self._edit(write)
        logger.info("imported %d punch records (replace=%s)", len(records), replace)
        return len(records)
