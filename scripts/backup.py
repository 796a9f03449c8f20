"""Backup punch records.

Writes the JSON export (the same document served by ``GET /api/export``)
into ``backups/``; restore it with ``POST /api/import?replace=1``.
"""

from __future__ import annotations

import asyncio
import importlib
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from punch_log.config import get_settings_module
from punch_log.container import build_container


async def export() -> str:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    return await container.coordinator.export_records()


def main() -> None:
    load_dotenv(override=False)
    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"punch_log_{ts}.json"
    out_file.write_text(asyncio.run(export()), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
