"""Modelos tipados para el registro diario de estabilidad."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from stability_tracker.scoring import score

RECORD_FIELDS: tuple[str, ...] = (
    "date",
    "pushups_done",
    "deep_work_done",
    "steps_count",
    "cigarettes_count",
    "score",
)


@dataclass
class DailyInputs:
    """Editable raw inputs for one day (not persisted by itself)."""

    pushups_done: bool = False
    deep_work_done: bool = False
    steps_count: int = 0
    cigarettes_count: int = 0


@dataclass(frozen=True)
class DailyRecord:
    """One persisted day, keyed by its ``YYYY-MM-DD`` date."""

    date: str
    pushups_done: bool = False
    deep_work_done: bool = False
    steps_count: int = 0
    cigarettes_count: int = 0
    score: int = 0

    @classmethod
    def build(cls, date: str, inputs: DailyInputs) -> DailyRecord:
        """Create a record whose score is derived from ``inputs``."""
        return cls(
            date=date,
            pushups_done=bool(inputs.pushups_done),
            deep_work_done=bool(inputs.deep_work_done),
            steps_count=max(0, int(inputs.steps_count)),
            cigarettes_count=max(0, int(inputs.cigarettes_count)),
            score=score(inputs),
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> DailyRecord:
        """Build a record from a store row (snake-case JSON keys).

        Args:
            row: Mapping as returned by the record store.

        Returns:
            Parsed record. Missing values fall back to the column defaults.

        Raises:
            ValueError: If the row has no ``date``.
        """
        date = row.get("date")
        if not date:
            raise ValueError(f"Row without date: {dict(row)!r}")
        return cls(
            date=str(date),
            pushups_done=bool(row.get("pushups_done")),
            deep_work_done=bool(row.get("deep_work_done")),
            steps_count=_non_negative(row.get("steps_count")),
            cigarettes_count=_non_negative(row.get("cigarettes_count")),
            score=_non_negative(row.get("score")),
        )

    def to_row(self) -> dict[str, object]:
        """Serialize to the store's JSON payload."""
        return {
            "date": self.date,
            "pushups_done": self.pushups_done,
            "deep_work_done": self.deep_work_done,
            "steps_count": self.steps_count,
            "cigarettes_count": self.cigarettes_count,
            "score": self.score,
        }

    def inputs(self) -> DailyInputs:
        """Return a fresh copy of the raw inputs."""
        return DailyInputs(
            pushups_done=self.pushups_done,
            deep_work_done=self.deep_work_done,
            steps_count=self.steps_count,
            cigarettes_count=self.cigarettes_count,
        )


def _non_negative(value: object) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return max(0, int(value))  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
