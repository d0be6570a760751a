"""Configuracion del almacen de registros (Supabase REST o SQLite local)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from stability_tracker.stores.base import RecordStore

DEFAULT_TABLE = "stability_logs"
DEFAULT_TIMEOUT = 10.0
PLACEHOLDER_MARKER = "YOUR_"

SETUP_SQL = f"""create table {DEFAULT_TABLE} (
  date text primary key,
  pushups_done boolean default false,
  deep_work_done boolean default false,
  steps_count integer default 0,
  cigarettes_count integer default 0,
  score integer default 0
);
-- Disable RLS for personal use:
alter table {DEFAULT_TABLE} disable row level security;"""


@dataclass(frozen=True)
class StoreConfig:
    """Store endpoint and credential, passed explicitly to the store."""

    url: str = ""
    api_key: str = ""
    table: str = DEFAULT_TABLE
    timeout: float = DEFAULT_TIMEOUT
    db_path: Path | None = None

    @property
    def rest_configured(self) -> bool:
        if not self.url or not self.api_key:
            return False
        return not any(PLACEHOLDER_MARKER in v for v in (self.url, self.api_key))

    @property
    def is_configured(self) -> bool:
        return self.db_path is not None or self.rest_configured


def load_config(env_file: Path | None = None) -> StoreConfig:
    """Read configuration from a dotenv file and the environment.

    Variables already present in the environment win over the file.

    Args:
        env_file: Explicit dotenv path; defaults to a ``.env`` lookup.

    Returns:
        Store configuration (possibly not configured).
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    db_path = os.getenv("STABILITY_DB_PATH", "").strip()
    return StoreConfig(
        url=os.getenv("SUPABASE_URL", "").strip().rstrip("/"),
        api_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        table=os.getenv("STABILITY_TABLE", "").strip() or DEFAULT_TABLE,
        timeout=_parse_timeout(os.getenv("STABILITY_TIMEOUT")),
        db_path=Path(db_path).expanduser() if db_path else None,
    )


def build_store(config: StoreConfig) -> RecordStore | None:
    """Create the record store for ``config`` or None when not configured."""
    if config.db_path is not None:
        from stability_tracker.stores.sqlite import SQLiteRecordStore

        return SQLiteRecordStore(config.db_path, table=config.table)
    if config.rest_configured:
        from stability_tracker.stores.rest import RestRecordStore

        return RestRecordStore(config)
    return None


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT
