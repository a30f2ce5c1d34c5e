"""ProgressRecord and SetEntry models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import SetType
from app.db.base import Base


class ProgressRecord(Base):
    """One dated performance entry for a (student, exercise) pair.

    weight/reps/sets are the legacy aggregate fields; per-set detail lives in
    SetEntry rows. reps is stored as text so range entries like "8-10" survive.
    The integer id doubles as insertion order for breaking recorded_at ties.
    """

    __tablename__ = "progress_records"
    __table_args__ = (
        Index("ix_progress_records_student_recorded", "student_id", "recorded_at"),
        Index("ix_progress_records_exercise_id", "exercise_id"),
        Index("ix_progress_records_category_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercise_categories.id", ondelete="SET NULL"), nullable=True
    )
    weight: Mapped[float] = mapped_column(Numeric(8, 2), default=0, nullable=False)
    reps: Mapped[str] = mapped_column(String(50), default="0", nullable=False)
    sets: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # legacy aggregate
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    student: Mapped["Student"] = relationship("Student", back_populates="progress_records")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="progress_records")
    set_entries: Mapped[list["SetEntry"]] = relationship(
        "SetEntry",
        back_populates="progress_record",
        passive_deletes=True,
        order_by="SetEntry.set_number",
    )


class SetEntry(Base):
    """One set of a progress record: type, load, reps and a note, at a 0-based position."""

    __tablename__ = "exercise_sets"
    __table_args__ = (
        UniqueConstraint("progress_record_id", "set_number", name="uq_exercise_sets_record_number"),
        Index("ix_exercise_sets_progress_record_id", "progress_record_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    progress_record_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("progress_records.id", ondelete="CASCADE"), nullable=False
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    set_type: Mapped[SetType] = mapped_column(
        Enum(SetType, name="set_type", values_callable=lambda e: [m.value for m in e]),
        default=SetType.VALID_1,
        nullable=False,
    )
    weight: Mapped[float] = mapped_column(Numeric(8, 2), default=0, nullable=False)
    reps: Mapped[str] = mapped_column(String(50), default="0", nullable=False)
    notes: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    progress_record: Mapped["ProgressRecord"] = relationship("ProgressRecord", back_populates="set_entries")
