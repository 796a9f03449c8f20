import asyncio
import json
from datetime import date, datetime

from punch_log.session.snapshot import SessionSnapshot, SnapshotStore
from punch_log.storage.medium import MemoryKeyValueMedium


def test_snapshot_document_shape():
    snap = SessionSnapshot(
        is_working=True,
        current_punch_in_time=datetime(2026, 1, 14, 9, 0),
        current_record_id="abc",
        today_date=date(2026, 1, 14),
    )
    assert json.loads(snap.to_json()) == {
        "version": 1,
        "isWorking": True,
        "currentPunchInTime": "2026-01-14T09:00:00",
        "currentRecordId": "abc",
        "todayDate": "2026-01-14",
    }
    assert SessionSnapshot.from_json(snap.to_json()) == snap


def test_store_save_load_clear():
    store = SnapshotStore(MemoryKeyValueMedium())
    snap = SessionSnapshot(is_working=False, current_punch_in_time=None, current_record_id=None, today_date=date(2026, 1, 14))

    async def scenario():
        await store.save(snap)
        loaded = await store.load()
        await store.clear()
        return loaded, await store.load()

    assert asyncio.run(scenario()) == (snap, None)


def test_unreadable_or_other_version_snapshot_is_ignored():
    for payload in ("{oops", '{"version": 99, "isWorking": true, "todayDate": "2026-01-14"}', '{"version": 1}'):
        store = SnapshotStore(MemoryKeyValueMedium({"punch_log:session": payload}))
        assert asyncio.run(store.load()) is None
