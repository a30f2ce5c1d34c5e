"""Progress records: append, edit the current value, sets, category moves, history."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from app.api.deps import get_board
from app.schemas.progress import (
    MoveExercise,
    ProgressRecordCreate,
    ProgressRecordRead,
    ProgressRecordUpdate,
    SetEntryRead,
    SetsReplace,
)
from app.services.board import ProgressBoard

router = APIRouter()


@router.get("", response_model=list[ProgressRecordRead])
async def list_progress(
    board: ProgressBoard = Depends(get_board),
    student_id: uuid.UUID | None = None,
    exercise_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 100,
):
    """All records newest first, optionally filtered by student and/or exercise."""
    return await board.list_history(student_id, exercise_id, skip, limit)


@router.post("", response_model=ProgressRecordRead, status_code=201)
async def record_progress(
    payload: ProgressRecordCreate,
    board: ProgressBoard = Depends(get_board),
):
    """Append a new dated entry to the student's history for the exercise."""
    return await board.record_progress(**payload.model_dump())


@router.patch("/{record_id}", response_model=ProgressRecordRead)
async def update_progress(
    record_id: int,
    payload: ProgressRecordUpdate,
    board: ProgressBoard = Depends(get_board),
):
    """Overwrite the record's values and refresh its date to now (no new row)."""
    return await board.update_progress(record_id, payload.model_dump(exclude_unset=True))


@router.delete("/{record_id}", status_code=204)
async def delete_progress(
    record_id: int,
    board: ProgressBoard = Depends(get_board),
):
    """Delete one record and its sets; the rest of the exercise's history stays."""
    await board.remove_progress(record_id)
    return None


@router.get("/{record_id}/sets", response_model=list[SetEntryRead])
async def get_sets(
    record_id: int,
    board: ProgressBoard = Depends(get_board),
):
    """Sets in order. Records without set rows report their legacy aggregate as sets."""
    return [SetEntryRead.from_view(v) for v in await board.get_sets(record_id)]


@router.put("/{record_id}/sets", response_model=list[SetEntryRead])
async def replace_sets(
    record_id: int,
    payload: SetsReplace,
    board: ProgressBoard = Depends(get_board),
):
    """Replace all sets of the record with the given list."""
    return [SetEntryRead.from_view(v) for v in await board.edit_sets(record_id, payload.sets)]


@router.put("/{record_id}/category", response_model=ProgressRecordRead)
async def move_exercise(
    record_id: int,
    payload: MoveExercise,
    board: ProgressBoard = Depends(get_board),
):
    """Move the record to another category, or to uncategorized with null."""
    return await board.move_exercise(record_id, payload.category_id)
