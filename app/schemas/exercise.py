"""Exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_NAME_LENGTH


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    muscle_group: str = Field(..., min_length=1, max_length=100)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    muscle_group: str | None = Field(None, min_length=1, max_length=100)


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime | None = None


class MuscleGroupExercises(BaseModel):
    """Exercises sharing one muscle-group label."""

    muscle_group: str
    exercises: list[ExerciseRead] = []
