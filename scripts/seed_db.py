from __future__ import annotations

import asyncio
import importlib

from dotenv import load_dotenv

from punch_log.common.datetime_utils import now_local
from punch_log.config import get_settings_module
from punch_log.container import build_container
from punch_log.records.sample_data import generate_sample_records


async def seed() -> int:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    records = generate_sample_records(now_local().date())
    await container.records_repo.bulk_upsert(records)
    return len(records)


def main() -> None:
    load_dotenv(override=False)
    count = asyncio.run(seed())
    print(f"OK: Seeded {count} sample punch records")


if __name__ == "__main__":
    main()
