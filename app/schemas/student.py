"""Student schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH


class StudentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: str | None = Field(None, max_length=MAX_EMAIL_LENGTH)
    phone: str | None = Field(None, max_length=50)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: str | None = Field(None, max_length=MAX_EMAIL_LENGTH)
    phone: str | None = Field(None, max_length=50)


class StudentRead(StudentBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime | None = None
