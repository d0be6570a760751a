"""Motor de sincronizacion: estado editable de hoy + historial del almacen."""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Callable
from dataclasses import replace
from enum import Enum

from stability_tracker.datekey import today_key
from stability_tracker.history import WINDOW_DAYS, HistorySummary, summarize
from stability_tracker.model import DailyInputs, DailyRecord
from stability_tracker.scoring import score
from stability_tracker.stores.base import RecordStore, StoreUnavailable

logger = logging.getLogger(__name__)

SAVED_FLASH_SECONDS = 2.0

BOOL_FIELDS = ("pushups_done", "deep_work_done")
COUNT_FIELDS = ("steps_count", "cigarettes_count")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class EngineState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    ERRORED = "errored"


class SyncEngine:
    """Reconciles today's editable inputs with the record store.

    ``store`` may be None: the engine then runs in "not configured" mode
    where ``activate`` and ``save`` do nothing.
    """

    def __init__(
        self,
        store: RecordStore | None,
        *,
        window: int = WINDOW_DAYS,
        today: Callable[[], str] = today_key,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._window = window
        self._today = today
        self._clock = clock
        self._form = DailyInputs()
        self._history: tuple[DailyRecord, ...] = ()
        self._state = EngineState.IDLE
        self._error: str | None = None
        self._saving = False
        self._saved_at: float | None = None
        self._closed = False
        # bumped by every fetch and by save; older fetch results are dropped
        self._generation = 0

    @property
    def configured(self) -> bool:
        return self._store is not None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def form(self) -> DailyInputs:
        return replace(self._form)

    @property
    def history(self) -> tuple[DailyRecord, ...]:
        return self._history

    @property
    def score(self) -> int:
        return score(self._form)

    @property
    def saved(self) -> bool:
        """True for a short while after a successful save."""
        if self._saved_at is None:
            return False
        return self._clock() - self._saved_at < SAVED_FLASH_SECONDS

    def summary(self) -> HistorySummary:
        return summarize(self._history)

    def today_record(self) -> DailyRecord | None:
        key = self._today()
        return next((r for r in self._history if r.date == key), None)

    def close(self) -> None:
        """Tear down; results of pending calls will be discarded."""
        self._closed = True

    def dismiss_error(self) -> None:
        self._error = None
        if self._state is EngineState.ERRORED:
            self._state = EngineState.READY

    def set_field(self, name: str, value: object) -> None:
        """Set one raw input of today's form.

        Counts are coerced leniently: non-numeric input becomes 0 and
        negative input is clamped to 0.

        Raises:
            KeyError: If ``name`` is not an input field.
        """
        if name in BOOL_FIELDS:
            setattr(self._form, name, bool(value))
        elif name in COUNT_FIELDS:
            setattr(self._form, name, _coerce_count(value))
        else:
            raise KeyError(name)

    async def activate(self) -> bool:
        """Load the history window and hydrate today's form.

        Returns:
            True if the history was refreshed.
        """
        store = self._store
        if store is None:
            self._state = EngineState.READY
            return False
        if self._saving:
            # the in-flight save reloads on its own
            return False
        self._state = EngineState.LOADING
        try:
            applied = await self._load(store)
        except StoreUnavailable as exc:
            self._fail(exc)
            return False
        if not applied:
            return False
        self._error = None
        self._state = EngineState.READY
        return True

    async def save(self) -> bool:
        """Persist today's form, then reload from the store.

        Dropped (returns False) while another save is in flight. A load
        still pending when the save starts is superseded by the save's
        own reload.
        """
        store = self._store
        if store is None or self._saving:
            return False
        self._saving = True
        self._generation += 1
        self._state = EngineState.SAVING
        self._saved_at = None
        try:
            record = DailyRecord.build(self._today(), self._form)
            await store.upsert(record)
            if self._closed:
                return False
            logger.info("Saved %s with score %d", record.date, record.score)
            if not await self._load(store):
                return False
        except StoreUnavailable as exc:
            self._fail(exc)
            return False
        finally:
            self._saving = False
        self._error = None
        self._state = EngineState.READY
        self._saved_at = self._clock()
        return True

    async def _load(self, store: RecordStore) -> bool:
        """Fetch the window and hydrate; False if the result is stale."""
        self._generation += 1
        generation = self._generation
        try:
            records = await store.fetch_recent(self._window)
        except StoreUnavailable:
            if self._is_stale(generation):
                return False
            raise
        if self._is_stale(generation):
            return False
        self._history = tuple(records)
        current = self.today_record()
        if current is not None:
            # score is recomputed from inputs, never copied
            self._form = current.inputs()
        return True

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    def _fail(self, exc: StoreUnavailable) -> None:
        if self._closed:
            return
        logger.warning("Record store error: %s", exc)
        self._error = str(exc)
        self._state = EngineState.ERRORED


def _coerce_count(value: object) -> int:
    """Integer prefix of ``value`` clamped at 0, or 0 if there is none."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return max(0, int(value))
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(0, int(match.group(1)))
