"""Exercise catalog CRUD and muscle-group listing."""

from __future__ import annotations

import logging
import uuid
from itertools import groupby

from fastapi import APIRouter, Depends
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.db.session import get_db
from app.models.exercise import Exercise
from app.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate, MuscleGroupExercises
from app.services import progress_store

logger = logging.getLogger(__name__)
router = APIRouter()


def _clean(data: dict) -> dict:
    for key in ("name", "muscle_group"):
        if key in data:
            data[key] = (data[key] or "").strip()
            if not data[key]:
                raise ValidationError(f"exercise {key.replace('_', ' ')} must not be empty")
    return data


async def _get_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise NotFoundError("Exercise", exercise_id)
    return exercise


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    search: str | None = None,
    skip: int = 0,
    limit: int = 200,
):
    """List exercises by muscle group then name; `search` matches either, case-insensitively."""
    stmt = select(Exercise)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(func.lower(Exercise.name).like(pattern), func.lower(Exercise.muscle_group).like(pattern))
        )
    result = await db.execute(
        stmt.order_by(Exercise.muscle_group, Exercise.name).offset(skip).limit(limit)
    )
    return list(result.scalars().all())


@router.get("/muscle-groups", response_model=list[MuscleGroupExercises])
async def list_muscle_groups(db: AsyncSession = Depends(get_db)):
    """Exercises grouped under their muscle-group label, labels alphabetical."""
    result = await db.execute(select(Exercise).order_by(Exercise.muscle_group, Exercise.name))
    return [
        MuscleGroupExercises(
            muscle_group=label,
            exercises=[ExerciseRead.model_validate(e) for e in group],
        )
        for label, group in groupby(result.scalars().all(), key=lambda e: e.muscle_group)
    ]


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    exercise = Exercise(**_clean(payload.model_dump()))
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _get_exercise(db, exercise_id)


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: uuid.UUID,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an exercise (partial)."""
    exercise = await _get_exercise(db, exercise_id)
    for k, v in _clean(payload.model_dump(exclude_unset=True)).items():
        setattr(exercise, k, v)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete an exercise together with every progress record of it."""
    await _get_exercise(db, exercise_id)
    async with db.begin_nested():
        removed = await progress_store.delete_for_exercise(db, exercise_id)
        await db.execute(delete(Exercise).where(Exercise.id == exercise_id))
    logger.info("Deleted exercise %s (%d progress records)", exercise_id, removed)
    return None
