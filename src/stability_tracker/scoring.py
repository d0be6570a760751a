"""Puntaje diario de estabilidad (0-4) y pistas por objetivo."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stability_tracker.model import DailyInputs, DailyRecord

STEPS_GOAL = 15000
CIGARETTES_LIMIT = 3
MAX_SCORE = 4


def checks(inputs: DailyInputs | DailyRecord) -> tuple[bool, bool, bool, bool]:
    """Evaluate the four threshold predicates, in fixed order.

    Order: pushups, deep work, steps goal, cigarettes limit.
    """
    return (
        bool(inputs.pushups_done),
        bool(inputs.deep_work_done),
        inputs.steps_count >= STEPS_GOAL,
        inputs.cigarettes_count <= CIGARETTES_LIMIT,
    )


def score(inputs: DailyInputs | DailyRecord) -> int:
    """Count satisfied predicates; always in ``[0, MAX_SCORE]``."""
    return sum(1 for ok in checks(inputs) if ok)


def achieved_markers(inputs: DailyInputs | DailyRecord) -> list[str]:
    """Names of the satisfied predicates, e.g. ``["pushups", "steps"]``."""
    names = ("pushups", "deep_work", "steps", "cigarettes")
    return [name for name, ok in zip(names, checks(inputs)) if ok]


def steps_hint(steps_count: int) -> str:
    if steps_count >= STEPS_GOAL:
        return "Goal reached"
    return f"{STEPS_GOAL - steps_count:,} to goal"


def cigarettes_hint(cigarettes_count: int) -> str:
    if cigarettes_count <= CIGARETTES_LIMIT:
        return "Within limit"
    return f"{cigarettes_count - CIGARETTES_LIMIT} over limit"


def score_band(value: int, max_score: int = MAX_SCORE) -> str:
    """Badge tier for a score: ``full``, ``half`` or ``low``."""
    if value == max_score:
        return "full"
    if value >= max_score / 2:
        return "half"
    return "low"
