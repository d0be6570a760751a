from __future__ import annotations

import itertools
import random

import pytest

from stability_tracker.model import DailyInputs, DailyRecord
from stability_tracker.scoring import (
    achieved_markers,
    checks,
    cigarettes_hint,
    score,
    score_band,
    steps_hint,
)

_STEPS = [0, 1, 14999, 15000, 15001, 40000]
_CIGS = [0, 2, 3, 4, 10, 60]


@pytest.mark.parametrize(
    ("pushups", "deep_work", "steps", "cigs"),
    list(itertools.product([False, True], [False, True], _STEPS, _CIGS)),
)
def test_score_counts_satisfied_predicates(
    pushups: bool, deep_work: bool, steps: int, cigs: int
) -> None:
    inputs = DailyInputs(pushups, deep_work, steps, cigs)
    expected = int(pushups) + int(deep_work) + int(steps >= 15000) + int(cigs <= 3)
    assert score(inputs) == expected
    assert 0 <= score(inputs) <= 4


def test_score_random_sample_in_range() -> None:
    rng = random.Random(20251215)
    for _ in range(500):
        inputs = DailyInputs(
            pushups_done=rng.random() < 0.5,
            deep_work_done=rng.random() < 0.5,
            steps_count=rng.randint(0, 60000),
            cigarettes_count=rng.randint(0, 40),
        )
        assert score(inputs) == sum(checks(inputs))
        assert 0 <= score(inputs) <= 4


def test_score_scenarios() -> None:
    assert score(DailyInputs(True, False, 15000, 3)) == 3
    assert score(DailyInputs(False, False, 0, 10)) == 0
    assert score(DailyInputs(True, True, 20000, 0)) == 4


def test_score_accepts_records() -> None:
    record = DailyRecord(date="2025-12-15", pushups_done=True, steps_count=16000)
    assert score(record) == 3


def test_achieved_markers_fixed_order() -> None:
    inputs = DailyInputs(True, False, 15000, 9)
    assert achieved_markers(inputs) == ["pushups", "steps"]


def test_hints() -> None:
    assert steps_hint(15000) == "Goal reached"
    assert steps_hint(3000) == "12,000 to goal"
    assert cigarettes_hint(3) == "Within limit"
    assert cigarettes_hint(5) == "2 over limit"


def test_score_band() -> None:
    assert score_band(4) == "full"
    assert score_band(2) == "half"
    assert score_band(3) == "half"
    assert score_band(1) == "low"
    assert score_band(0) == "low"
