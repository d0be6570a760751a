"""Cliente HTTP para la tabla de registros via la API REST (PostgREST) de Supabase."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stability_tracker.config import StoreConfig
from stability_tracker.model import DailyRecord
from stability_tracker.stores.base import (
    RecordStore,
    StoreUnavailable,
    newest_first,
    records_from_rows,
)

logger = logging.getLogger(__name__)

MERGE_PREFER = "resolution=merge-duplicates,return=representation"


class RestRecordStore(RecordStore):
    """Record store backed by a Supabase table."""

    def __init__(
        self,
        config: StoreConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create the client.

        Args:
            config: Endpoint, credential, table and timeout.
            transport: Optional httpx transport (tests inject a mock).
        """
        self._config = config
        self._transport = transport

    @property
    def table_url(self) -> str:
        return f"{self._config.url}/rest/v1/{self._config.table}"

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._config.api_key,
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            transport=self._transport,
        )

    async def fetch_recent(self, limit: int) -> list[DailyRecord]:
        params = {"order": "date.desc", "limit": str(limit)}
        logger.debug("GET %s %s", self.table_url, params)
        try:
            async with self._client() as client:
                resp = await client.get(
                    self.table_url, params=params, headers=self._headers()
                )
        except httpx.HTTPError as exc:
            raise _transport_error(exc) from exc

        return newest_first(records_from_rows(_json_rows(resp)), limit)

    async def upsert(self, record: DailyRecord) -> DailyRecord:
        headers = {**self._headers(), "Prefer": MERGE_PREFER}
        logger.debug("POST %s date=%s", self.table_url, record.date)
        try:
            async with self._client() as client:
                resp = await client.post(
                    self.table_url,
                    params={"on_conflict": "date"},
                    json=record.to_row(),
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            raise _transport_error(exc) from exc

        records = records_from_rows(_json_rows(resp))
        if not records:
            raise StoreUnavailable("Upsert returned no representation")
        return records[0]


def _transport_error(exc: httpx.HTTPError) -> StoreUnavailable:
    logger.warning("Record store unreachable: %s", exc)
    return StoreUnavailable(str(exc) or type(exc).__name__)


def _json_rows(resp: httpx.Response) -> list[dict[str, Any]]:
    """Return the JSON array of a successful response.

    Raises:
        StoreUnavailable: On a non-success status or a malformed body.
    """
    if not resp.is_success:
        logger.warning("Record store replied %s: %s", resp.status_code, resp.text)
        raise StoreUnavailable(resp.text or f"HTTP {resp.status_code}")
    try:
        payload: Any = resp.json()
    except ValueError as exc:
        raise StoreUnavailable(f"Invalid JSON from record store: {exc}") from exc
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise StoreUnavailable(f"Unexpected payload from record store: {payload!r}")
    return [row for row in payload if isinstance(row, dict)]
