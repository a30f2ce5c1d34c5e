"""Student CRUD plus the per-student board, history and categories."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_board
from app.core.enums import CategoryAction
from app.core.errors import NotFoundError, ValidationError
from app.db.session import get_db
from app.models.student import Student
from app.schemas.category import CategoryRead, CategoryWrite
from app.schemas.progress import (
    AddExercise,
    BoardRead,
    CategoryBucket,
    CurrentRecordRead,
    HistoryEntryRead,
    ProgressRecordRead,
)
from app.schemas.student import StudentCreate, StudentRead, StudentUpdate
from app.services import category_store, progress_store
from app.services.board import ProgressBoard

logger = logging.getLogger(__name__)
router = APIRouter()


def _clean(data: dict) -> dict:
    if "name" in data:
        data["name"] = (data["name"] or "").strip()
        if not data["name"]:
            raise ValidationError("student name must not be empty")
    for key in ("email", "phone"):
        if key in data and data[key] is not None:
            data[key] = data[key].strip() or None
    return data


async def _get_student(db: AsyncSession, student_id: uuid.UUID) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student", student_id)
    return student


@router.get("", response_model=list[StudentRead])
async def list_students(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    """List students by name."""
    result = await db.execute(select(Student).order_by(Student.name).offset(skip).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=StudentRead, status_code=201)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
):
    student = Student(**_clean(payload.model_dump()))
    db.add(student)
    await db.flush()
    await db.refresh(student)
    return student


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await _get_student(db, student_id)


@router.patch("/{student_id}", response_model=StudentRead)
async def update_student(
    student_id: uuid.UUID,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a student (partial)."""
    student = await _get_student(db, student_id)
    for k, v in _clean(payload.model_dump(exclude_unset=True)).items():
        setattr(student, k, v)
    await db.flush()
    await db.refresh(student)
    return student


@router.delete("/{student_id}", status_code=204)
async def delete_student(
    student_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a student with all progress records, their sets, and categories."""
    await _get_student(db, student_id)
    async with db.begin_nested():
        records = await progress_store.delete_for_student(db, student_id)
        categories = await category_store.delete_for_student(db, student_id)
        await db.execute(delete(Student).where(Student.id == student_id))
    logger.info(
        "Deleted student %s (%d records, %d categories)", student_id, records, categories
    )
    return None


@router.get("/{student_id}/board", response_model=BoardRead)
async def get_current_board(
    student_id: uuid.UUID,
    board: ProgressBoard = Depends(get_board),
):
    """Current value of every tracked exercise, grouped by category (uncategorized last)."""
    result = await board.get_current_board(student_id)
    return BoardRead(
        student_id=result.student_id,
        buckets=[
            CategoryBucket(
                category_id=b.category_id,
                name=b.name,
                records=[CurrentRecordRead.model_validate(r) for r in b.records],
            )
            for b in result.buckets
        ],
    )


@router.post("/{student_id}/exercises", response_model=ProgressRecordRead, status_code=201)
async def add_exercise(
    student_id: uuid.UUID,
    payload: AddExercise,
    board: ProgressBoard = Depends(get_board),
):
    """Start tracking an exercise for the student, in the chosen category (optional)."""
    return await board.add_exercise(student_id, payload.exercise_id, payload.category_id)


@router.get(
    "/{student_id}/exercises/{exercise_id}/history",
    response_model=list[HistoryEntryRead],
)
async def get_history(
    student_id: uuid.UUID,
    exercise_id: uuid.UUID,
    board: ProgressBoard = Depends(get_board),
):
    """Full history of one exercise, newest first; the first entry is current."""
    records = await board.get_history(student_id, exercise_id)
    return [
        HistoryEntryRead.model_validate(r).model_copy(update={"is_current": i == 0})
        for i, r in enumerate(records)
    ]


@router.get("/{student_id}/categories", response_model=list[CategoryRead])
async def list_categories(
    student_id: uuid.UUID,
    board: ProgressBoard = Depends(get_board),
):
    return await board.list_categories(student_id)


@router.post("/{student_id}/categories", response_model=CategoryRead, status_code=201)
async def create_category(
    student_id: uuid.UUID,
    payload: CategoryWrite,
    board: ProgressBoard = Depends(get_board),
):
    return await board.manage_category(CategoryAction.CREATE, student_id=student_id, name=payload.name)
