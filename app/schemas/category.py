"""Category schemas. Name emptiness is checked by the category store, not here."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryWrite(BaseModel):
    name: str = Field(..., max_length=100)


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    student_id: UUID
    name: str
    created_at: datetime


class CategoryDeleted(BaseModel):
    id: UUID
    cleared_records: int
