"""Shared enums for models and API."""

from enum import Enum


class SetType(str, Enum):
    """Role of a set within an exercise."""

    WARMUP = "warmup"
    PREPARATION = "preparation"
    VALID_1 = "valid_1"
    VALID_2 = "valid_2"
    VALID_3 = "valid_3"


class CategoryAction(str, Enum):
    """Operations accepted by the category management entry point."""

    CREATE = "create"
    RENAME = "rename"
    DELETE = "delete"
