from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import Clock, now_local
from ..core.constants import DEFAULT_TIMER_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class SessionTimer:
    """Elapsed seconds since punch in, for display.

    The wall-clock offset is sampled once at ``start``; after that elapsed
    time advances with a monotonic clock delta, so wall-clock jumps do not
    move the counter. When ``on_tick`` is given a periodic task pushes the
    value every ``interval`` seconds until ``stop``.
    """

    def __init__(
        self,
        *,
        clock: Clock = now_local,
        monotonic: Callable[[], float] = time.monotonic,
        on_tick: Optional[Callable[[int], None]] = None,
        interval: float = DEFAULT_TIMER_INTERVAL_SECONDS,
    ):
        self._clock = clock
        self._monotonic = monotonic
        self._on_tick = on_tick
        self._interval = interval
        self._base_seconds: Optional[float] = None
        self._started_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self, punch_in_time: datetime) -> None:
        self.stop()
        self._base_seconds = max(0.0, (self._clock() - punch_in_time).total_seconds())
        self._started_at = self._monotonic()
        if self._on_tick is not None:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._base_seconds = None
        self._started_at = None

    def elapsed_seconds(self) -> int:
        if self._started_at is None or self._base_seconds is None:
            return 0
        return int(self._base_seconds + (self._monotonic() - self._started_at))

    async def _run(self) -> None:
        while True:
            self._on_tick(self.elapsed_seconds())
            await asyncio.sleep(self._interval)
