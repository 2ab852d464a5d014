"""Pydantic schemas for teachers and the courses they teach."""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError

EMPLOYEE_NUMBER_MAX_LENGTH = 10
EMPLOYEE_NUMBER_PATTERN = re.compile(r"^T\d+$")
PHONE_PATTERN = re.compile(
    r"^\+?\s?(\(\d+\)|\d)[\d\s().-]*\d(\s?(x|ext\.?)\s?\d+)?$",
    re.IGNORECASE,
)
MIN_PHONE_DIGITS = 7
# Matches the Numeric(10, 2) salary column.
SALARY_MAX_DIGITS = 10
SALARY_DECIMAL_PLACES = 2

# Attribute name -> (JSON alias, message) for fields every write must carry.
REQUIRED_FIELDS: dict[str, tuple[str, str]] = {
    "first_name": ("TeacherFName", "First name is required."),
    "last_name": ("TeacherLName", "Last name is required."),
    "employee_number": ("EmployeeNumber", "Employee number is required."),
}


class Course(BaseModel):
    course_id: int = Field(..., alias="CourseId")
    code: str = Field(..., alias="CourseCode")
    name: str = Field(..., alias="CourseName")

    model_config = ConfigDict(populate_by_name=True)


class Teacher(BaseModel):
    """A teacher record as exchanged over HTTP and stored in ``teachers``.

    Text fields are optional at the schema level so that a missing name is
    reported as a validation outcome by the repository rather than a parse
    failure. Format constraints apply whenever a value is present.
    """

    teacher_id: Optional[int] = Field(default=None, alias="TeacherId")
    first_name: Optional[str] = Field(default=None, alias="TeacherFName")
    last_name: Optional[str] = Field(default=None, alias="TeacherLName")
    employee_number: Optional[str] = Field(default=None, alias="EmployeeNumber")
    hire_date: Optional[datetime] = Field(default=None, alias="HireDate")
    salary: Optional[Decimal] = Field(
        default=None,
        alias="Salary",
        max_digits=SALARY_MAX_DIGITS,
        decimal_places=SALARY_DECIMAL_PLACES,
    )
    work_phone: Optional[str] = Field(default=None, alias="TeacherWorkPhone")
    courses_taught: Optional[List[Course]] = Field(default=None, alias="CoursesTaught")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator(
        "teacher_id",
        "first_name",
        "last_name",
        "employee_number",
        "hire_date",
        "salary",
        "work_phone",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("employee_number")
    @classmethod
    def validate_employee_number(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) > EMPLOYEE_NUMBER_MAX_LENGTH:
            raise PydanticCustomError(
                "employee_number_length",
                "Employee number must be at most {max_length} characters.",
                {"max_length": EMPLOYEE_NUMBER_MAX_LENGTH},
            )
        if not EMPLOYEE_NUMBER_PATTERN.match(value):
            raise PydanticCustomError(
                "employee_number_format",
                "Employee number must start with 'T' followed by digits (e.g., T123).",
            )
        return value

    @field_validator("hire_date")
    @classmethod
    def validate_hire_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        # Keep the wall-clock time as given; the stored date is the local calendar day.
        value = value.replace(tzinfo=None)
        if value.date() > date.today():
            raise PydanticCustomError("hire_date_future", "Hire date cannot be in the future.")
        return value

    @field_validator("salary")
    @classmethod
    def validate_salary(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and value < 0:
            raise PydanticCustomError("salary_negative", "Salary must be non-negative.")
        return value

    @field_validator("work_phone")
    @classmethod
    def validate_work_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        digits = sum(char.isdigit() for char in value)
        if not PHONE_PATTERN.match(value) or digits < MIN_PHONE_DIGITS:
            raise PydanticCustomError("phone_format", "Invalid phone number.")
        return value

    @field_serializer("salary", when_used="json")
    def serialize_salary(self, value: Optional[Decimal]) -> Optional[float]:
        return None if value is None else float(value)

    def missing_required(self) -> dict[str, str]:
        """Return ``{alias: message}`` for every required field left empty."""

        missing: dict[str, str] = {}
        for attribute, (alias, message) in REQUIRED_FIELDS.items():
            value = getattr(self, attribute)
            if value is None or not str(value).strip():
                missing[alias] = message
        return missing

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


def validation_errors_by_field(errors: list[dict[str, Any]]) -> dict[str, str]:
    """Collapse pydantic ``errors()`` output into ``{field alias: message}``."""

    by_field: dict[str, str] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        key = location[0] if location else "__all__"
        by_field.setdefault(key, error.get("msg", "Invalid value."))
    return by_field


__all__ = [
    "Course",
    "EMPLOYEE_NUMBER_MAX_LENGTH",
    "REQUIRED_FIELDS",
    "Teacher",
    "validation_errors_by_field",
]
