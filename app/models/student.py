"""Student model - the person whose progress is tracked."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Student(Base):
    """A student of the practice. Owns progress records and categories."""

    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Deletion is cascaded explicitly by DELETE /students/{id}; no ORM cascade here
    progress_records: Mapped[list["ProgressRecord"]] = relationship(
        "ProgressRecord", back_populates="student", passive_deletes=True
    )
    categories: Mapped[list["Category"]] = relationship(
        "Category", back_populates="student", passive_deletes=True, order_by="Category.created_at"
    )
