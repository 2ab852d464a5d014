"""Column mappings between ``teachers``/``courses`` rows and the schemas.

Every nullable column converts store NULL to ``None`` and back. Converters
only ever see non-null values.
"""
from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from ..schemas import Course, Teacher

_CENTS = Decimal("0.01")


def _identity(value: Any) -> Any:
    return value


def _salary_to_store(value: Decimal) -> str:
    return str(value)


def _salary_from_store(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS)


def _hiredate_to_store(value: datetime) -> str:
    return value.isoformat()


def _hiredate_from_store(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    attribute: str
    column: str
    to_store: Callable[[Any], Any] = _identity
    from_store: Callable[[Any], Any] = _identity

    def dump(self, model: Any) -> Any:
        value = getattr(model, self.attribute)
        return None if value is None else self.to_store(value)

    def load(self, row: sqlite3.Row) -> Any:
        raw = row[self.column]
        return None if raw is None else self.from_store(raw)


TEACHER_KEY = ColumnMapping("teacher_id", "teacherid")

# Order matters: it is the column order of INSERT and UPDATE statements.
TEACHER_COLUMNS: tuple[ColumnMapping, ...] = (
    ColumnMapping("first_name", "teacherfname"),
    ColumnMapping("last_name", "teacherlname"),
    ColumnMapping("employee_number", "employeenumber"),
    ColumnMapping("hire_date", "hiredate", _hiredate_to_store, _hiredate_from_store),
    ColumnMapping("salary", "salary", _salary_to_store, _salary_from_store),
    ColumnMapping("work_phone", "teacherworkphone"),
)

COURSE_COLUMNS: tuple[ColumnMapping, ...] = (
    ColumnMapping("course_id", "courseid"),
    ColumnMapping("code", "coursecode"),
    ColumnMapping("name", "coursename"),
)


def teacher_values(teacher: Teacher) -> tuple[Any, ...]:
    """Return store values for the mutable teacher columns."""

    return tuple(mapping.dump(teacher) for mapping in TEACHER_COLUMNS)


def row_to_teacher(row: sqlite3.Row) -> Teacher:
    fields = {mapping.attribute: mapping.load(row) for mapping in TEACHER_COLUMNS}
    fields[TEACHER_KEY.attribute] = TEACHER_KEY.load(row)
    # Rows were validated on the way in; skip re-running hire-date checks.
    return Teacher.model_construct(**fields)


def row_to_course(row: sqlite3.Row) -> Course:
    return Course(**{mapping.attribute: mapping.load(row) for mapping in COURSE_COLUMNS})


__all__ = [
    "COURSE_COLUMNS",
    "ColumnMapping",
    "TEACHER_COLUMNS",
    "TEACHER_KEY",
    "row_to_course",
    "row_to_teacher",
    "teacher_values",
]
