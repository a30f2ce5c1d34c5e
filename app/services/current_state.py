"""Current-state derivation: fold a student's history into one current view per exercise.

Everything here works on rows that were already fetched; there is no I/O.
The history must arrive ordered newest first (recorded_at DESC, id ASC),
which is the order the progress store returns.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from app.models.exercise import Exercise
from app.models.progress import ProgressRecord
from app.services.reps import Reps, is_blank, load_reps, reps_value


@dataclass(frozen=True)
class CurrentRecordView:
    """Current record of one exercise, annotated for display.

    The display_* fields are None where the raw value is the "not yet
    recorded" zero.
    """

    record_id: int
    student_id: uuid.UUID
    exercise_id: uuid.UUID
    category_id: uuid.UUID | None
    weight: float
    reps: Reps
    legacy_sets: int
    detailed_sets: int
    effective_sets: int
    notes: str
    recorded_at: datetime
    display_weight: float | None
    display_reps: int | str | None
    display_sets: int | None
    exercise_name: str | None = None
    muscle_group: str | None = None


def dedupe_current(history: Iterable[ProgressRecord]) -> list[ProgressRecord]:
    """Keep the first record seen per exercise id, preserving encounter order."""
    current: dict[uuid.UUID, ProgressRecord] = {}
    for record in history:
        if record.exercise_id not in current:
            current[record.exercise_id] = record
    return list(current.values())


def effective_set_count(detailed: int | None, legacy: int | None) -> int:
    """Detailed set rows win when there are any, then the legacy aggregate, then 0."""
    if detailed and detailed > 0:
        return detailed
    if legacy and legacy > 0:
        return legacy
    return 0


def display_weight(weight: float | None) -> float | None:
    if not weight:
        return None
    return float(weight)


def display_reps(reps: Reps) -> int | str | None:
    if is_blank(reps):
        return None
    return reps_value(reps)


def display_sets(count: int) -> int | None:
    return count or None


def annotate(
    record: ProgressRecord,
    detailed_count: int = 0,
    exercise: Exercise | None = None,
) -> CurrentRecordView:
    weight = float(record.weight or 0)
    reps = load_reps(record.reps)
    legacy = record.sets or 0
    effective = effective_set_count(detailed_count, legacy)
    return CurrentRecordView(
        record_id=record.id,
        student_id=record.student_id,
        exercise_id=record.exercise_id,
        category_id=record.category_id,
        weight=weight,
        reps=reps,
        legacy_sets=legacy,
        detailed_sets=detailed_count,
        effective_sets=effective,
        notes=record.notes or "",
        recorded_at=record.recorded_at,
        display_weight=display_weight(weight),
        display_reps=display_reps(reps),
        display_sets=display_sets(effective),
        exercise_name=exercise.name if exercise is not None else None,
        muscle_group=exercise.muscle_group if exercise is not None else None,
    )


def derive_current(
    history: Iterable[ProgressRecord],
    set_counts: Mapping[int, int],
    exercises: Mapping[uuid.UUID, Exercise] | None = None,
) -> list[CurrentRecordView]:
    """One annotated current view per exercise.

    set_counts comes from the set store's bulk count; records absent from it
    have no detail rows.
    """
    exercises = exercises or {}
    return [
        annotate(record, set_counts.get(record.id, 0), exercises.get(record.exercise_id))
        for record in dedupe_current(history)
    ]
