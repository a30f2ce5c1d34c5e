"""Progress record, set entry and board schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import MAX_NOTES_LENGTH
from app.core.enums import SetType
from app.services.reps import load_reps, reps_value

# Loose numeric inputs: the services coerce them, so strings are accepted here
LooseNumber = float | str | None
LooseReps = int | str | None
# Append path only: fractional counts are truncated by the record store
LooseCount = int | float | str | None


def _stored_reps(v):
    if isinstance(v, str):
        return reps_value(load_reps(v))
    return v


class SetEntryWrite(BaseModel):
    set_type: SetType = SetType.VALID_1
    weight: LooseNumber = None
    reps: LooseReps = None
    notes: str | None = Field("", max_length=500)


class SetEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID | None = None
    set_number: int
    set_type: SetType
    weight: float
    reps: int | str
    notes: str = ""
    is_legacy: bool = False

    @classmethod
    def from_view(cls, view) -> "SetEntryRead":
        return cls(
            id=view.id,
            set_number=view.set_number,
            set_type=view.set_type,
            weight=view.weight,
            reps=reps_value(view.reps),
            notes=view.notes,
            is_legacy=view.is_legacy,
        )


class SetsReplace(BaseModel):
    sets: list[SetEntryWrite] = []


class ProgressRecordCreate(BaseModel):
    student_id: UUID
    exercise_id: UUID
    category_id: UUID | None = None
    weight: LooseNumber = None
    reps: LooseCount = None
    sets: LooseCount = None
    notes: str | None = Field("", max_length=MAX_NOTES_LENGTH)
    recorded_at: datetime | None = None


class ProgressRecordUpdate(BaseModel):
    weight: LooseNumber = None
    reps: LooseReps = None
    sets: int | str | None = None
    notes: str | None = Field(None, max_length=MAX_NOTES_LENGTH)


class ProgressRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    student_id: UUID
    exercise_id: UUID
    category_id: UUID | None = None
    weight: float
    reps: int | str
    sets: int
    notes: str = ""
    recorded_at: datetime

    @field_validator("reps", mode="before")
    @classmethod
    def _reps(cls, v):
        return _stored_reps(v)


class HistoryEntryRead(ProgressRecordRead):
    """History row; is_current marks the newest entry of its exercise."""

    is_current: bool = False


class AddExercise(BaseModel):
    exercise_id: UUID
    category_id: UUID | None = None


class MoveExercise(BaseModel):
    category_id: UUID | None = None


class CurrentRecordRead(BaseModel):
    """Current value of one exercise. None means "not recorded yet"."""

    model_config = ConfigDict(from_attributes=True)
    record_id: int
    exercise_id: UUID
    exercise_name: str | None = None
    muscle_group: str | None = None
    category_id: UUID | None = None
    weight: float | None = Field(None, validation_alias="display_weight")
    reps: int | str | None = Field(None, validation_alias="display_reps")
    sets: int | None = Field(None, validation_alias="display_sets")
    detailed_sets: int = 0
    legacy_sets: int = 0
    notes: str = ""
    recorded_at: datetime


class CategoryBucket(BaseModel):
    category_id: UUID | None = None
    name: str
    records: list[CurrentRecordRead] = []


class BoardRead(BaseModel):
    """Current board of a student: categories in creation order, uncategorized last."""

    student_id: UUID
    buckets: list[CategoryBucket] = []
