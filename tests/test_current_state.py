import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.models.exercise import Exercise
from app.models.progress import ProgressRecord
from app.services.current_state import (
    annotate,
    dedupe_current,
    derive_current,
    effective_set_count,
)
from app.services.reps import NumericReps, TextReps

STUDENT = uuid.uuid4()
BENCH = uuid.uuid4()
SQUAT = uuid.uuid4()
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def record(record_id, exercise_id, days_ago=0, weight=20, reps="10", sets=3, category_id=None):
    return ProgressRecord(
        id=record_id,
        student_id=STUDENT,
        exercise_id=exercise_id,
        category_id=category_id,
        weight=weight,
        reps=reps,
        sets=sets,
        notes="",
        recorded_at=NOW - timedelta(days=days_ago),
    )


def test_dedupe_keeps_first_record_per_exercise():
    history = [
        record(3, BENCH, days_ago=0, weight=25),
        record(4, SQUAT, days_ago=1, weight=60),
        record(1, BENCH, days_ago=7, weight=20),
        record(2, SQUAT, days_ago=9, weight=50),
    ]
    current = dedupe_current(history)
    assert [r.id for r in current] == [3, 4]


def test_dedupe_of_empty_history():
    assert dedupe_current([]) == []


@pytest.mark.parametrize("detailed", [0, 1, 5])
@pytest.mark.parametrize("legacy", [0, 3])
def test_effective_set_count_prefers_detail(detailed, legacy):
    expected = detailed if detailed > 0 else legacy
    assert effective_set_count(detailed, legacy) == expected


def test_effective_set_count_handles_missing_values():
    assert effective_set_count(None, None) == 0
    assert effective_set_count(None, 4) == 4


def test_annotate_uses_detail_count_over_legacy():
    view = annotate(record(1, BENCH, sets=3), detailed_count=5)
    assert view.effective_sets == 5
    assert view.display_sets == 5
    assert view.legacy_sets == 3


def test_zero_values_display_as_none():
    view = annotate(record(1, BENCH, weight=0, reps="0", sets=0))
    assert view.display_weight is None
    assert view.display_reps is None
    assert view.display_sets is None
    assert view.weight == 0.0
    assert view.reps == NumericReps(0)


def test_empty_reps_display_as_none():
    view = annotate(record(1, BENCH, reps=""))
    assert view.display_reps is None


def test_text_reps_are_displayed_verbatim():
    view = annotate(record(1, BENCH, reps="8-10"))
    assert view.reps == TextReps("8-10")
    assert view.display_reps == "8-10"


def test_derive_current_annotates_each_exercise():
    history = [
        record(3, BENCH, days_ago=0, weight=25, sets=0),
        record(2, SQUAT, days_ago=2, weight=60, sets=4),
        record(1, BENCH, days_ago=7, weight=20, sets=3),
    ]
    exercises = {BENCH: Exercise(id=BENCH, name="Bench Press", muscle_group="Chest")}
    views = derive_current(history, {3: 2}, exercises)

    bench, squat = views
    assert bench.record_id == 3
    assert bench.display_weight == 25.0
    assert bench.effective_sets == 2
    assert bench.exercise_name == "Bench Press"
    assert bench.muscle_group == "Chest"
    assert squat.record_id == 2
    assert squat.effective_sets == 4
    assert squat.exercise_name is None
