from __future__ import annotations

import importlib

from dotenv import load_dotenv

from punch_log.config import get_settings_module
from punch_log.database.bootstrap import apply_schema, list_tables
from punch_log.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    conn = DatabaseConnection(DBConfig(path=str(settings.SQLITE_FILE)))
    apply_schema(conn)
    tables = list_tables(conn)
    print(f"OK: Applied schema -> {conn.path} (tables={', '.join(tables)})")


if __name__ == "__main__":
    main()
