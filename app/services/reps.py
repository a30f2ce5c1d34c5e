"""Repetition values: a whole number of reps or free text such as "8-10" or "AMRAP".

The column stores the rendered string; these helpers move between the raw
input, the tagged value and the stored form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from app.core.constants import MAX_LOAD, MAX_REPS_TEXT_LENGTH
from app.core.errors import ValidationError

_INT_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class NumericReps:
    value: int


@dataclass(frozen=True)
class TextReps:
    text: str


Reps = Union[NumericReps, TextReps]


def parse_reps(raw) -> Reps:
    """Strict parse used on the set-aware edit path: text is kept, blank is rejected."""
    if isinstance(raw, (NumericReps, TextReps)):
        raw = render_reps(raw)
    if raw is None or isinstance(raw, bool):
        raise ValidationError("reps must not be empty")
    if isinstance(raw, int):
        if raw < 0:
            raise ValidationError("reps must not be negative")
        return NumericReps(raw)
    if isinstance(raw, float):
        if raw < 0 or not raw.is_integer():
            raise ValidationError(f"reps must be a whole number, got {raw}")
        return NumericReps(int(raw))
    text = str(raw).strip()
    if not text:
        raise ValidationError("reps must not be empty")
    if len(text) > MAX_REPS_TEXT_LENGTH:
        raise ValidationError(f"reps text longer than {MAX_REPS_TEXT_LENGTH} characters")
    if _INT_RE.match(text):
        return NumericReps(int(text))
    return TextReps(text)


def coerce_reps(raw) -> NumericReps:
    """Lenient numeric coercion used when appending: anything non-numeric counts as 0."""
    if isinstance(raw, NumericReps):
        return raw
    return NumericReps(coerce_int(raw))


def coerce_number(raw) -> float:
    """Lenient float coercion. Absent or unparsable values become 0."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(str(raw).strip().replace(",", "."))
    except ValueError:
        return 0.0
    if value != value or value in (float("inf"), float("-inf")):
        return 0.0
    return value


def coerce_load(raw) -> float:
    """Load coercion: unparsable values become 0, values the column cannot hold are rejected."""
    value = coerce_number(raw)
    if abs(value) > MAX_LOAD:
        raise ValidationError(f"load must be between -{MAX_LOAD} and {MAX_LOAD}, got {value}")
    return value


def coerce_int(raw) -> int:
    """Integer coercion for set counts and numeric reps; fractions are truncated."""
    return int(coerce_number(raw))


def render_reps(reps: Reps) -> str:
    if isinstance(reps, NumericReps):
        return str(reps.value)
    return reps.text


def load_reps(stored: str | None) -> Reps:
    """Rebuild the tagged value from the stored column."""
    text = (stored or "").strip()
    if not text:
        return NumericReps(0)
    if _INT_RE.match(text):
        return NumericReps(int(text))
    return TextReps(text)


def reps_value(reps: Reps) -> int | str:
    """Plain JSON-friendly value: int for counts, str for free text."""
    if isinstance(reps, NumericReps):
        return reps.value
    return reps.text


def is_blank(reps: Reps) -> bool:
    """True for 0, "" and "0", which mean "not recorded yet"."""
    if isinstance(reps, NumericReps):
        return reps.value == 0
    return reps.text.strip() in ("", "0")
