"""Persistencia SQLite local para los registros diarios (modo sin red)."""

from __future__ import annotations

import asyncio
import logging
import re
import sqlite3
from pathlib import Path

from stability_tracker.config import DEFAULT_TABLE
from stability_tracker.model import DailyRecord
from stability_tracker.stores.base import (
    RecordStore,
    StoreUnavailable,
    records_from_rows,
)

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# column -> SQL type/default, without the primary key
_COLUMNS: dict[str, str] = {
    "pushups_done": "INTEGER NOT NULL DEFAULT 0",
    "deep_work_done": "INTEGER NOT NULL DEFAULT 0",
    "steps_count": "INTEGER NOT NULL DEFAULT 0",
    "cigarettes_count": "INTEGER NOT NULL DEFAULT 0",
    "score": "INTEGER NOT NULL DEFAULT 0",
}


class SQLiteRecordStore(RecordStore):
    """Record store in a local SQLite file, one row per date."""

    def __init__(self, db_path: Path, table: str = DEFAULT_TABLE) -> None:
        """Create store and ensure schema exists.

        Raises:
            ValueError: If ``table`` is not a plain SQL identifier.
        """
        if not _IDENTIFIER.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._db_path = db_path
        self._table = table
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        columns = ",\n    ".join(f"{name} {ddl}" for name, ddl in _COLUMNS.items())
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    date TEXT PRIMARY KEY,
                    {columns}
                )
                """
            )
            self._migrate(conn)
            conn.commit()

    def _migrate(self, conn: sqlite3.Connection) -> None:
        """Add columns missing from files created by older versions."""
        existing = {
            row["name"] for row in conn.execute(f"PRAGMA table_info({self._table})")
        }
        for name, ddl in _COLUMNS.items():
            if name not in existing:
                conn.execute(f"ALTER TABLE {self._table} ADD COLUMN {name} {ddl}")

    async def fetch_recent(self, limit: int) -> list[DailyRecord]:
        rows = await asyncio.to_thread(self._select_recent, limit)
        return records_from_rows(rows)

    async def upsert(self, record: DailyRecord) -> DailyRecord:
        stored = await asyncio.to_thread(self._write, record)
        records = records_from_rows([stored] if stored is not None else [])
        if not records:
            raise StoreUnavailable(f"Row for {record.date} missing after write")
        return records[0]

    def _select_recent(self, limit: int) -> list[dict[str, object]]:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"SELECT * FROM {self._table} ORDER BY date DESC LIMIT ?",
                    (max(0, limit),),
                ).fetchall()
        except sqlite3.Error as exc:
            logger.warning("SQLite read failed: %s", exc)
            raise StoreUnavailable(str(exc)) from exc
        return [dict(row) for row in rows]

    def _write(self, record: DailyRecord) -> dict[str, object] | None:
        row = record.to_row()
        names = list(row)
        placeholders = ", ".join("?" for _ in names)
        updates = ", ".join(f"{n}=excluded.{n}" for n in names if n != "date")
        try:
            with self._connect() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {self._table}({", ".join(names)})
                    VALUES({placeholders})
                    ON CONFLICT(date) DO UPDATE SET {updates}
                    """,
                    tuple(row.values()),
                )
                stored = conn.execute(
                    f"SELECT * FROM {self._table} WHERE date = ?",
                    (record.date,),
                ).fetchone()
                conn.commit()
        except sqlite3.Error as exc:
            logger.warning("SQLite write failed: %s", exc)
            raise StoreUnavailable(str(exc)) from exc
        return dict(stored) if stored is not None else None
