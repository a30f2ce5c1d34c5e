"""Category rename/delete. Listing and creation live under /students/{id}/categories."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from app.api.deps import get_board
from app.core.enums import CategoryAction
from app.schemas.category import CategoryDeleted, CategoryRead, CategoryWrite
from app.services.board import ProgressBoard

router = APIRouter()


@router.patch("/{category_id}", response_model=CategoryRead)
async def rename_category(
    category_id: uuid.UUID,
    payload: CategoryWrite,
    board: ProgressBoard = Depends(get_board),
):
    return await board.manage_category(CategoryAction.RENAME, category_id=category_id, name=payload.name)


@router.delete("/{category_id}", response_model=CategoryDeleted)
async def delete_category(
    category_id: uuid.UUID,
    board: ProgressBoard = Depends(get_board),
):
    """Delete a category. Records that used it (current and historical) become uncategorized."""
    cleared = await board.manage_category(CategoryAction.DELETE, category_id=category_id)
    return CategoryDeleted(id=category_id, cleared_records=cleared)
