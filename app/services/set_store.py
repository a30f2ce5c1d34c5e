"""Set detail store: ordered per-set rows of a progress record."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import MAX_SETS_PER_RECORD
from app.core.enums import SetType
from app.core.errors import NotFoundError, ValidationError
from app.models.progress import ProgressRecord, SetEntry
from app.schemas.progress import SetEntryWrite
from app.services.reps import Reps, coerce_load, load_reps, parse_reps, render_reps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetEntryView:
    """A set as shown to callers. id is None for sets synthesized from legacy fields."""

    set_number: int
    set_type: SetType
    weight: float
    reps: Reps
    notes: str
    id: uuid.UUID | None = None

    @property
    def is_legacy(self) -> bool:
        return self.id is None


def _view(row: SetEntry) -> SetEntryView:
    return SetEntryView(
        id=row.id,
        set_number=row.set_number,
        set_type=row.set_type,
        weight=float(row.weight or 0),
        reps=load_reps(row.reps),
        notes=row.notes or "",
    )


def legacy_fallback(record: ProgressRecord) -> list[SetEntryView]:
    """Sets implied by a record that predates per-set tracking: `sets` copies of its load/reps."""
    weight = float(record.weight or 0)
    reps = load_reps(record.reps)
    return [
        SetEntryView(set_number=i, set_type=SetType.VALID_1, weight=weight, reps=reps, notes="")
        for i in range(max(record.sets or 0, 0))
    ]


async def _get_record(db: AsyncSession, record_id: int) -> ProgressRecord:
    record = await db.get(ProgressRecord, record_id)
    if record is None:
        raise NotFoundError("Progress record", record_id)
    return record


async def _lock_record(db: AsyncSession, record_id: int) -> ProgressRecord:
    """The record, row-locked until the transaction ends; replaces of one record's sets serialize on it."""
    result = await db.execute(
        select(ProgressRecord).where(ProgressRecord.id == record_id).with_for_update()
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise NotFoundError("Progress record", record_id)
    return record


async def load_sets(db: AsyncSession, record_id: int) -> list[SetEntryView]:
    """Detail rows by position, or the legacy fallback when the record has none."""
    record = await _get_record(db, record_id)
    result = await db.execute(
        select(SetEntry)
        .where(SetEntry.progress_record_id == record_id)
        .order_by(SetEntry.set_number)
    )
    rows = result.scalars().all()
    if not rows:
        return legacy_fallback(record)
    return [_view(r) for r in rows]


def _stage(record_id: int, position: int, entry: SetEntryWrite) -> SetEntry:
    try:
        reps = parse_reps(entry.reps)
        weight = coerce_load(entry.weight)
    except ValidationError as e:
        raise ValidationError(f"set {position + 1}: {e.message}") from e
    return SetEntry(
        progress_record_id=record_id,
        set_number=position,
        set_type=entry.set_type,
        weight=weight,
        reps=render_reps(reps),
        notes=(entry.notes or "").strip(),
    )


async def replace_sets(
    db: AsyncSession,
    record_id: int,
    entries: Sequence[SetEntryWrite],
) -> list[SetEntryView]:
    """Swap every detail row of the record for `entries`, numbered in sequence order.

    All rows are built and validated before anything is deleted, and the
    delete + insert run in one savepoint, so a failure leaves the old sets.
    """
    record = await _lock_record(db, record_id)
    if len(entries) > MAX_SETS_PER_RECORD:
        raise ValidationError(f"at most {MAX_SETS_PER_RECORD} sets per record")
    staged = [_stage(record.id, i, entry) for i, entry in enumerate(entries)]

    async with db.begin_nested():
        await db.execute(delete(SetEntry).where(SetEntry.progress_record_id == record.id))
        db.add_all(staged)
        await db.flush()

    logger.info("Replaced sets of progress record %s with %d entries", record.id, len(staged))
    return [_view(s) for s in staged]


async def count_sets(db: AsyncSession, record_ids: Iterable[int]) -> dict[int, int]:
    """Detail row count per record in one query. Records without rows are left out."""
    ids = set(record_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(SetEntry.progress_record_id, func.count(SetEntry.id))
        .where(SetEntry.progress_record_id.in_(ids))
        .group_by(SetEntry.progress_record_id)
    )
    return {record_id: int(n) for record_id, n in result.all() if n}


async def delete_for_records(db: AsyncSession, record_ids: Iterable[int]) -> int:
    """Remove the detail rows of the given records; used by record and student deletion."""
    ids = set(record_ids)
    if not ids:
        return 0
    result = await db.execute(delete(SetEntry).where(SetEntry.progress_record_id.in_(ids)))
    return result.rowcount or 0
