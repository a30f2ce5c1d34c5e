"""Entry points used by the HTTP layer: the current board, history, writes.

Each call runs on the caller's session. Database failures come out as
StorageError (or IntegrityError for constraint violations) with the
driver's message; nothing is retried, so a failed write is never doubled.
"""

from __future__ import annotations

import functools
import logging
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import exc as sa_exc
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import UNCATEGORIZED
from app.core.enums import CategoryAction
from app.core.errors import IntegrityError, ProgressTrackerError, StorageError, ValidationError
from app.models.category import Category
from app.models.exercise import Exercise
from app.models.progress import ProgressRecord
from app.schemas.progress import SetEntryWrite
from app.services import category_store, progress_store, reorganization, set_store
from app.services.current_state import CurrentRecordView, dedupe_current, derive_current
from app.services.set_store import SetEntryView

logger = logging.getLogger(__name__)


def storage_errors(fn):
    """Translate database driver failures into domain errors."""

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except ProgressTrackerError:
            raise
        except sa_exc.IntegrityError as e:
            logger.exception("Integrity violation in %s", fn.__name__)
            raise IntegrityError(str(e.orig or e)) from e
        except sa_exc.DBAPIError as e:
            logger.warning("Storage failure in %s: %s", fn.__name__, e.orig or e)
            raise StorageError(str(e.orig or e)) from e
        except OSError as e:
            logger.warning("Storage unreachable in %s: %s", fn.__name__, e)
            raise StorageError(str(e)) from e

    return wrapper


@dataclass
class Bucket:
    category: Category | None
    records: list[CurrentRecordView] = field(default_factory=list)

    @property
    def category_id(self) -> uuid.UUID | None:
        return self.category.id if self.category is not None else None

    @property
    def name(self) -> str:
        return self.category.name if self.category is not None else "Uncategorized"


@dataclass
class Board:
    student_id: uuid.UUID
    buckets: list[Bucket] = field(default_factory=list)

    def bucket(self, category_id: uuid.UUID | None) -> Bucket:
        for b in self.buckets:
            if b.category_id == category_id:
                return b
        raise KeyError(category_id)


class ProgressBoard:
    """Facade over the stores for one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _exercises(self, ids) -> dict[uuid.UUID, Exercise]:
        ids = set(ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Exercise).where(Exercise.id.in_(ids)))
        return {e.id: e for e in result.scalars().all()}

    @storage_errors
    async def get_current_board(self, student_id: uuid.UUID) -> Board:
        """Current record per exercise, with effective set counts, bucketed by category."""
        await progress_store.require_student(self.db, student_id)
        current = dedupe_current(await progress_store.list_student_history(self.db, student_id))
        counts = await set_store.count_sets(self.db, [r.id for r in current])
        exercises = await self._exercises(r.exercise_id for r in current)
        views = derive_current(current, counts, exercises)
        categories = await category_store.list_categories(self.db, student_id)

        parts = reorganization.partition(views, categories)
        buckets = [Bucket(c, parts[c.id]) for c in categories]
        buckets.append(Bucket(None, parts[UNCATEGORIZED]))
        return Board(student_id=student_id, buckets=buckets)

    @storage_errors
    async def get_history(self, student_id: uuid.UUID, exercise_id: uuid.UUID) -> list[ProgressRecord]:
        await progress_store.require_student(self.db, student_id)
        await progress_store.require_exercise(self.db, exercise_id)
        return await progress_store.list_history(self.db, student_id, exercise_id)

    @storage_errors
    async def list_history(
        self,
        student_id: uuid.UUID | None = None,
        exercise_id: uuid.UUID | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ProgressRecord]:
        return await progress_store.list_all_history(self.db, student_id, exercise_id, skip, limit)

    @storage_errors
    async def record_progress(
        self,
        student_id: uuid.UUID,
        exercise_id: uuid.UUID,
        category_id: uuid.UUID | None = None,
        weight=None,
        reps=None,
        sets=None,
        notes: str | None = None,
        recorded_at: datetime | None = None,
    ) -> ProgressRecord:
        return await progress_store.append(
            self.db, student_id, exercise_id, category_id, weight, reps, sets, notes, recorded_at
        )

    @storage_errors
    async def add_exercise(
        self,
        student_id: uuid.UUID,
        exercise_id: uuid.UUID,
        category_id: uuid.UUID | None = None,
    ) -> ProgressRecord:
        return await progress_store.add_exercise_to_student(self.db, student_id, exercise_id, category_id)

    @storage_errors
    async def update_progress(self, record_id: int, fields: Mapping) -> ProgressRecord:
        return await progress_store.update_latest(self.db, record_id, fields)

    @storage_errors
    async def remove_progress(self, record_id: int) -> None:
        await progress_store.remove(self.db, record_id)

    @storage_errors
    async def get_sets(self, record_id: int) -> list[SetEntryView]:
        return await set_store.load_sets(self.db, record_id)

    @storage_errors
    async def edit_sets(self, record_id: int, entries: Sequence[SetEntryWrite]) -> list[SetEntryView]:
        return await set_store.replace_sets(self.db, record_id, entries)

    @storage_errors
    async def move_exercise(self, record_id: int, category_id: uuid.UUID | None) -> ProgressRecord:
        return await reorganization.move(self.db, record_id, category_id)

    @storage_errors
    async def list_categories(self, student_id: uuid.UUID) -> list[Category]:
        await progress_store.require_student(self.db, student_id)
        return await category_store.list_categories(self.db, student_id)

    @storage_errors
    async def manage_category(
        self,
        action: CategoryAction,
        *,
        student_id: uuid.UUID | None = None,
        category_id: uuid.UUID | None = None,
        name: str | None = None,
    ) -> Category | int:
        """create -> Category, rename -> Category, delete -> number of records uncategorized."""
        try:
            action = CategoryAction(action)
        except ValueError:
            raise ValidationError(f"unknown category action: {action}") from None
        if action is CategoryAction.CREATE:
            if student_id is None:
                raise ValidationError("student_id is required to create a category")
            return await category_store.create_category(self.db, student_id, name)
        if category_id is None:
            raise ValidationError(f"category_id is required to {action.value} a category")
        if action is CategoryAction.RENAME:
            return await category_store.rename_category(self.db, category_id, name)
        return await reorganization.delete_category(self.db, category_id)
