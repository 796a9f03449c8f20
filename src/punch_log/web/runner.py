from __future__ import annotations

import asyncio
import threading
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class LoopRunner:
    """One event loop on a daemon thread.

    Flask views are synchronous and may run on several worker threads; every
    coroutine is submitted to this single loop so the store lock and the
    session state are only ever touched from one place.
    """

    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "LoopRunner":
        if self._thread is None:
            self._thread = threading.Thread(target=self._loop.run_forever, name="punch-log-loop", daemon=True)
            self._thread.start()
        return self

    def run(self, coro: Awaitable[T]) -> T:
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result()

    def stop(self) -> None:
        if self._thread is not None:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join()
            self._thread = None
        self._loop.close()
