"""Category store: per-student named groupings. Row-level operations only."""

from __future__ import annotations

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MAX_CATEGORY_NAME_LENGTH
from app.core.errors import NotFoundError, ValidationError
from app.models.category import Category
from app.models.student import Student


def clean_name(name: str | None) -> str:
    """Trimmed category name; blank names are rejected."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("category name must not be empty")
    if len(cleaned) > MAX_CATEGORY_NAME_LENGTH:
        raise ValidationError(f"category name longer than {MAX_CATEGORY_NAME_LENGTH} characters")
    return cleaned


async def get_category(db: AsyncSession, category_id: uuid.UUID) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category", category_id)
    return category


async def list_categories(db: AsyncSession, student_id: uuid.UUID) -> list[Category]:
    """Categories of a student, oldest first."""
    result = await db.execute(
        select(Category)
        .where(Category.student_id == student_id)
        .order_by(Category.created_at.asc(), Category.id)
    )
    return list(result.scalars().all())


async def create_category(db: AsyncSession, student_id: uuid.UUID, name: str) -> Category:
    cleaned = clean_name(name)
    if await db.get(Student, student_id) is None:
        raise NotFoundError("Student", student_id)
    category = Category(student_id=student_id, name=cleaned)
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def rename_category(db: AsyncSession, category_id: uuid.UUID, name: str) -> Category:
    cleaned = clean_name(name)
    category = await get_category(db, category_id)
    category.name = cleaned
    await db.flush()
    return category


async def delete_category_row(db: AsyncSession, category_id: uuid.UUID) -> None:
    """Delete just the row; clearing record references is the reorganization engine's job."""
    await db.execute(delete(Category).where(Category.id == category_id))


async def delete_for_student(db: AsyncSession, student_id: uuid.UUID) -> int:
    result = await db.execute(delete(Category).where(Category.student_id == student_id))
    return result.rowcount or 0
