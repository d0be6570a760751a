"""Resumen de la ventana de historial (14 días) y tabla de texto."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from stability_tracker.model import DailyRecord
from stability_tracker.scoring import MAX_SCORE, achieved_markers

WINDOW_DAYS = 14
WINDOW_MAX = WINDOW_DAYS * MAX_SCORE

_DAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_MARKER_LABELS: dict[str, str] = {
    "pushups": "P",
    "deep_work": "D",
    "steps": "S",
    "cigarettes": "C",
}


@dataclass(frozen=True)
class HistorySummary:
    """Totals over a history window.

    ``max_possible`` is the "earned so far" denominator (``len * 4``);
    ``window_max`` is the fixed ceiling used for ``percent``.
    """

    total_score: int
    max_possible: int
    window_max: int
    percent: int


def summarize(history: Sequence[DailyRecord]) -> HistorySummary:
    """Aggregate scores of ``history``."""
    total = sum((r.score or 0) for r in history)
    if not history:
        percent = 0
    else:
        # half-up rounding, not banker's
        percent = math.floor(total / WINDOW_MAX * 100 + 0.5)
    return HistorySummary(
        total_score=total,
        max_possible=len(history) * MAX_SCORE,
        window_max=WINDOW_MAX,
        percent=min(100, max(0, percent)),
    )


def history_frame(
    history: Sequence[DailyRecord], today: str | None = None
) -> pd.DataFrame:
    """Build the display table: date, day, markers, score.

    Args:
        history: Records, newest first.
        today: Date key labelled ``Today`` instead of its date.

    Returns:
        One row per record, in the given order.
    """
    columns = ["date", "day", "markers", "score"]
    if not history:
        return pd.DataFrame(columns=columns)
    rows = [
        {
            "date": "Today" if r.date == today else r.date,
            "day": _day_label(r.date),
            "markers": " ".join(_MARKER_LABELS[m] for m in achieved_markers(r)),
            "score": f"{r.score}/{MAX_SCORE}",
        }
        for r in history
    ]
    return pd.DataFrame(rows, columns=columns)


def format_history(history: Sequence[DailyRecord], today: str | None = None) -> str:
    """Render the history table as aligned text."""
    df = history_frame(history, today=today)
    if df.empty:
        return "No entries yet. Save your first day!"
    return df.to_string(index=False)


def _day_label(date_key: str) -> str:
    """Weekday label for a date key, empty if the key does not parse."""
    parsed = pd.to_datetime(date_key, format="%Y-%m-%d", errors="coerce")
    if pd.isna(parsed):
        return ""
    return _DAY_LABELS[parsed.weekday()]
