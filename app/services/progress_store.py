"""Progress record store: the dated history of each (student, exercise) pair.

History order everywhere is recorded_at DESC with ties going to the
earliest inserted row (id ASC), so the first row per exercise is current.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MAX_NOTES_LENGTH
from app.core.errors import NotFoundError, ValidationError
from app.models.category import Category
from app.models.exercise import Exercise
from app.models.progress import ProgressRecord
from app.models.student import Student
from app.services import set_store
from app.services.current_state import dedupe_current
from app.services.reps import coerce_int, coerce_load, coerce_reps, parse_reps, render_reps

logger = logging.getLogger(__name__)

HISTORY_ORDER = (ProgressRecord.recorded_at.desc(), ProgressRecord.id.asc())
UPDATABLE_FIELDS = frozenset({"weight", "reps", "sets", "notes"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clean_notes(notes: str | None) -> str:
    text = (notes or "").strip()
    if len(text) > MAX_NOTES_LENGTH:
        raise ValidationError(f"notes longer than {MAX_NOTES_LENGTH} characters")
    return text


async def get_record(db: AsyncSession, record_id: int) -> ProgressRecord:
    record = await db.get(ProgressRecord, record_id)
    if record is None:
        raise NotFoundError("Progress record", record_id)
    return record


async def require_student(db: AsyncSession, student_id: uuid.UUID) -> Student:
    student = await db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    return student


async def require_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if exercise is None:
        raise NotFoundError("Exercise", exercise_id)
    return exercise


async def require_category_of(
    db: AsyncSession, category_id: uuid.UUID, student_id: uuid.UUID
) -> Category:
    """The category, provided it exists and belongs to the student."""
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)
    if category.student_id != student_id:
        raise ValidationError("category belongs to another student")
    return category


async def list_history(
    db: AsyncSession, student_id: uuid.UUID, exercise_id: uuid.UUID
) -> list[ProgressRecord]:
    """History of one pair, newest first. The first element is the current value."""
    result = await db.execute(
        select(ProgressRecord)
        .where(ProgressRecord.student_id == student_id, ProgressRecord.exercise_id == exercise_id)
        .order_by(*HISTORY_ORDER)
    )
    return list(result.scalars().all())


async def list_student_history(db: AsyncSession, student_id: uuid.UUID) -> list[ProgressRecord]:
    """Every record of a student across exercises, newest first."""
    result = await db.execute(
        select(ProgressRecord)
        .where(ProgressRecord.student_id == student_id)
        .order_by(*HISTORY_ORDER)
    )
    return list(result.scalars().all())


async def list_all_history(
    db: AsyncSession,
    student_id: uuid.UUID | None = None,
    exercise_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 100,
) -> list[ProgressRecord]:
    """Global history view, optionally narrowed to a student and/or exercise."""
    stmt = select(ProgressRecord)
    if student_id is not None:
        stmt = stmt.where(ProgressRecord.student_id == student_id)
    if exercise_id is not None:
        stmt = stmt.where(ProgressRecord.exercise_id == exercise_id)
    result = await db.execute(stmt.order_by(*HISTORY_ORDER).offset(skip).limit(limit))
    return list(result.scalars().all())


async def list_current_per_exercise(db: AsyncSession, student_id: uuid.UUID) -> list[ProgressRecord]:
    """Most recent record of each exercise the student has history for."""
    return dedupe_current(await list_student_history(db, student_id))


async def append(
    db: AsyncSession,
    student_id: uuid.UUID,
    exercise_id: uuid.UUID,
    category_id: uuid.UUID | None = None,
    weight=None,
    reps=None,
    sets=None,
    notes: str | None = None,
    recorded_at: datetime | None = None,
) -> ProgressRecord:
    """Insert a new history row. Numeric fields are coerced, unparsable values become 0."""
    await require_student(db, student_id)
    await require_exercise(db, exercise_id)
    if category_id is not None:
        await require_category_of(db, category_id, student_id)
    record = ProgressRecord(
        student_id=student_id,
        exercise_id=exercise_id,
        category_id=category_id,
        weight=coerce_load(weight),
        reps=render_reps(coerce_reps(reps)),
        sets=coerce_int(sets),
        notes=_clean_notes(notes),
        recorded_at=recorded_at or _now(),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    logger.info(
        "Appended progress record %s (student=%s exercise=%s)", record.id, student_id, exercise_id
    )
    return record


async def add_exercise_to_student(
    db: AsyncSession,
    student_id: uuid.UUID,
    exercise_id: uuid.UUID,
    category_id: uuid.UUID | None = None,
) -> ProgressRecord:
    """Start tracking an exercise with an all-zero record in the given category context."""
    existing = await db.execute(
        select(ProgressRecord.id)
        .where(ProgressRecord.student_id == student_id, ProgressRecord.exercise_id == exercise_id)
        .limit(1)
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("student already tracks this exercise")
    return await append(db, student_id, exercise_id, category_id, 0, 0, 0, "")


async def update_latest(db: AsyncSession, record_id: int, fields: Mapping) -> ProgressRecord:
    """Overwrite load/reps/sets/notes of a record and move its date to now.

    The refreshed date makes the record current again without adding a row.
    reps is parsed strictly: free text is kept as is, blank is rejected.
    """
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"fields cannot be updated: {', '.join(sorted(unknown))}")
    changes: dict = {}
    if "weight" in fields:
        changes["weight"] = coerce_load(fields["weight"])
    if "reps" in fields:
        changes["reps"] = render_reps(parse_reps(fields["reps"]))
    if "sets" in fields:
        changes["sets"] = coerce_int(fields["sets"])
    if "notes" in fields:
        changes["notes"] = _clean_notes(fields["notes"])

    record = await get_record(db, record_id)
    for k, v in changes.items():
        setattr(record, k, v)
    record.recorded_at = _now()
    await db.flush()
    await db.refresh(record)
    return record


async def remove(db: AsyncSession, record_id: int) -> None:
    """Delete one record and its set rows. Other history of the exercise is untouched."""
    record = await get_record(db, record_id)
    async with db.begin_nested():
        await set_store.delete_for_records(db, [record.id])
        await db.delete(record)
        await db.flush()
    logger.info("Removed progress record %s", record_id)


async def _delete_where(db: AsyncSession, *criteria) -> int:
    result = await db.execute(select(ProgressRecord.id).where(*criteria))
    ids = list(result.scalars().all())
    if not ids:
        return 0
    await set_store.delete_for_records(db, ids)
    await db.execute(delete(ProgressRecord).where(ProgressRecord.id.in_(ids)))
    return len(ids)


async def delete_for_student(db: AsyncSession, student_id: uuid.UUID) -> int:
    """Cascade step of student deletion: records and their sets."""
    return await _delete_where(db, ProgressRecord.student_id == student_id)


async def delete_for_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> int:
    """Cascade step of exercise deletion: records and their sets."""
    return await _delete_where(db, ProgressRecord.exercise_id == exercise_id)
