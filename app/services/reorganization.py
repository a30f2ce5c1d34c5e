"""Category reorganization: bucket current records, move them, delete categories safely."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import UNCATEGORIZED
from app.core.errors import ValidationError
from app.models.category import Category
from app.models.progress import ProgressRecord
from app.services import category_store, progress_store
from app.services.current_state import CurrentRecordView

logger = logging.getLogger(__name__)


def partition(
    current: Sequence[CurrentRecordView],
    categories: Sequence[Category],
) -> dict[str | uuid.UUID, list[CurrentRecordView]]:
    """Bucket records by category id. Unknown or missing categories go to UNCATEGORIZED.

    Every category gets a key, empty or not, in the given order after UNCATEGORIZED.
    """
    buckets: dict[str | uuid.UUID, list[CurrentRecordView]] = {UNCATEGORIZED: []}
    for category in categories:
        buckets[category.id] = []
    for record in current:
        key = record.category_id
        if key is None or key not in buckets:
            key = UNCATEGORIZED
        buckets[key].append(record)
    return buckets


async def move(
    db: AsyncSession,
    record_id: int,
    target_category_id: uuid.UUID | None,
) -> ProgressRecord:
    """Point one record at another category (or None). Other rows are not touched."""
    record = await progress_store.get_record(db, record_id)
    if record.category_id == target_category_id:
        raise ValidationError("record is already in that category")
    if target_category_id is not None:
        await progress_store.require_category_of(db, target_category_id, record.student_id)
    record.category_id = target_category_id
    await db.flush()
    return record


async def delete_category(db: AsyncSession, category_id: uuid.UUID) -> int:
    """Delete a category, then clear it from every record that referenced it.

    Applies to the whole history, not only current records. Returns the
    number of records moved to uncategorized.
    """
    await category_store.get_category(db, category_id)
    referencing = await db.execute(
        select(func.count(ProgressRecord.id)).where(ProgressRecord.category_id == category_id)
    )
    cleared = int(referencing.scalar() or 0)
    async with db.begin_nested():
        await category_store.delete_category_row(db, category_id)
        await db.execute(
            update(ProgressRecord)
            .where(ProgressRecord.category_id == category_id)
            .values(category_id=None)
        )
    logger.info("Deleted category %s, %d records now uncategorized", category_id, cleared)
    return cleared
