"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.category import Category
from app.models.exercise import Exercise
from app.models.progress import ProgressRecord, SetEntry
from app.models.student import Student

__all__ = [
    "Category",
    "Exercise",
    "ProgressRecord",
    "SetEntry",
    "Student",
]
