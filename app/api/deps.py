"""Shared FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.board import ProgressBoard


async def get_board(db: AsyncSession = Depends(get_db)) -> ProgressBoard:
    """Facade bound to the request's session."""
    return ProgressBoard(db)
