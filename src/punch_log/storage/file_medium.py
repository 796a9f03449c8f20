"""JSON file medium: one file per key inside a data directory.

Writes go to a temporary file in the same directory which then replaces the
target with ``os.replace``, so a reader sees either the previous document or
the new one, never a partial write.
"""
from __future__ import annotations

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from ..core.exceptions import StorageIOError
from .medium import KeyValueMedium

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


class FileKeyValueMedium(KeyValueMedium):
    def __init__(self, directory: str | Path):
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE.sub('_', key)}.json"

    async def get_item(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, self.path_for(key))

    @staticmethod
    def _read(path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(f"cannot read {path}: {exc}") from exc

    @staticmethod
    def _write(path: Path, value: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageIOError(f"cannot write {path}: {exc}") from exc

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise StorageIOError(f"cannot remove {path}: {exc}") from exc
