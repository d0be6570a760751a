"""Clases base para almacenes de registros diarios."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from stability_tracker.model import DailyRecord


class StoreUnavailable(Exception):
    """A read or write against the record store did not succeed.

    The message is the raw text reported by the server (or the transport).
    """


class RecordStore(ABC):
    """Abstract record store keyed by date."""

    @abstractmethod
    async def fetch_recent(self, limit: int) -> list[DailyRecord]:
        """Return the newest records, ordered by date descending.

        Args:
            limit: Maximum number of records.

        Raises:
            StoreUnavailable: If the read fails.
        """

    @abstractmethod
    async def upsert(self, record: DailyRecord) -> DailyRecord:
        """Create or merge the record for ``record.date``.

        Every non-key field is overwritten with the supplied values.

        Returns:
            The persisted record.

        Raises:
            StoreUnavailable: If the write fails.
        """


def newest_first(records: list[DailyRecord], limit: int) -> list[DailyRecord]:
    """Order by date descending and keep at most ``limit`` records."""
    ordered = sorted(records, key=lambda r: r.date, reverse=True)
    return ordered[: max(0, limit)]


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[DailyRecord]:
    """Parse store rows; a malformed row is a store failure.

    Raises:
        StoreUnavailable: If a row cannot be parsed (e.g. it has no date).
    """
    try:
        return [DailyRecord.from_row(row) for row in rows]
    except ValueError as exc:
        raise StoreUnavailable(str(exc)) from exc
