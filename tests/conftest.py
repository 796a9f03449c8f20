from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Dict, Optional

import pytest

from punch_log.coordinator.service import PunchCoordinator
from punch_log.core.exceptions import StorageIOError
from punch_log.records.kv_repository import KeyValuePunchRepository
from punch_log.session.snapshot import SnapshotStore
from punch_log.storage.medium import MemoryKeyValueMedium


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)

    def set(self, now: datetime) -> None:
        self.now = now


class FakeMonotonic:
    def __init__(self, value: float = 1000.0):
        self.value = value

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FlakyMedium(MemoryKeyValueMedium):
    """Memory medium whose writes can be switched to fail."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__(initial)
        self.fail_writes = False
        self.fail_keys: Optional[set] = None

    def _should_fail(self, key: str) -> bool:
        return self.fail_writes and (self.fail_keys is None or key in self.fail_keys)

    async def set_item(self, key: str, value: str) -> None:
        if self._should_fail(key):
            raise StorageIOError(f"disk full while writing {key}")
        await super().set_item(key, value)

    async def remove_item(self, key: str) -> None:
        if self._should_fail(key):
            raise StorageIOError(f"disk full while removing {key}")
        await super().remove_item(key)


class YieldingMedium(FlakyMedium):
    """Suspends on every access so concurrent coroutines interleave."""

    async def get_item(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        await super().set_item(key, value)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 14, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def medium() -> FlakyMedium:
    return FlakyMedium()


@pytest.fixture
def repo(medium) -> KeyValuePunchRepository:
    return KeyValuePunchRepository(medium)


@pytest.fixture
def snapshots(medium) -> SnapshotStore:
    return SnapshotStore(medium)


@pytest.fixture
def coordinator(repo, snapshots, clock, monotonic) -> PunchCoordinator:
    return PunchCoordinator(repo, snapshots, clock=clock, monotonic=monotonic)


@pytest.fixture
def yielding_medium() -> YieldingMedium:
    return YieldingMedium()


@pytest.fixture
def yielding_repo(yielding_medium) -> KeyValuePunchRepository:
    return KeyValuePunchRepository(yielding_medium)
