"""Example: drive the coordinator directly (no Flask).

Controllers are a thin layer; the session logic lives in the coordinator.
"""

import asyncio
import importlib

from punch_log.config import get_settings_module
from punch_log.container import build_container
from punch_log.core.enums import PresetRange


async def main():
    settings = importlib.import_module(get_settings_module())
    coordinator = build_container(settings).coordinator

    today = await coordinator.initialize()
    print("working:", today.is_working, "today:", round(today.total_hours, 2), "h")
    print("this week:", await coordinator.get_stats(PresetRange.THIS_WEEK))


if __name__ == "__main__":
    asyncio.run(main())
