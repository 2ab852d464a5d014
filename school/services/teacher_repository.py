"""Data access for the ``teachers`` table and the courses each teacher teaches.

Every public method opens exactly one connection through the
:class:`~school.database.ConnectionProvider`, runs parameterized statements
only, and releases the connection before returning. Lookups report a missing
row as :class:`NotFound`; rejected writes come back as :class:`Failed`.
Store errors (``sqlite3.Error``) are not caught here.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from typing import List

from ..database import ConnectionProvider
from ..db.mapping import TEACHER_COLUMNS, row_to_course, row_to_teacher, teacher_values
from ..schemas import Course, Teacher
from .outcomes import ErrorKind, Failed, Found, Lookup, NotFound, Outcome

LOGGER = logging.getLogger(__name__)

_COLUMN_NAMES = [mapping.column for mapping in TEACHER_COLUMNS]
_INSERT_SQL = "INSERT INTO teachers ({columns}) VALUES ({placeholders})".format(
    columns=", ".join(_COLUMN_NAMES),
    placeholders=", ".join("?" for _ in _COLUMN_NAMES),
)
_UPDATE_SQL = "UPDATE teachers SET {assignments} WHERE teacherid = ?".format(
    assignments=", ".join(f"{column} = ?" for column in _COLUMN_NAMES),
)
_EMPLOYEE_NUMBER_CONSTRAINT = "teachers.employeenumber"


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _is_employee_number_conflict(exc: sqlite3.IntegrityError) -> bool:
    return _EMPLOYEE_NUMBER_CONSTRAINT in str(exc)


def _duplicate(employee_number: str | None) -> Failed:
    message = f"Employee number {employee_number} is already in use."
    return Failed(ErrorKind.DUPLICATE_KEY, message, {"EmployeeNumber": message})


def _missing(fields: dict[str, str]) -> Failed:
    names = ", ".join(sorted(fields))
    return Failed(ErrorKind.VALIDATION, f"Missing required fields: {names}.", fields)


class TeacherRepository:
    """Teacher persistence over a per-call SQLite connection."""

    def __init__(self, provider: ConnectionProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> ConnectionProvider:
        return self._provider

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self) -> List[Teacher]:
        """Return every teacher in the order the store yields them."""

        with self._provider.scope() as conn:
            rows = conn.execute("SELECT * FROM teachers").fetchall()
        return [row_to_teacher(row) for row in rows]

    def get(self, teacher_id: int, include_courses: bool = False) -> Lookup[Teacher]:
        with self._provider.scope() as conn:
            row = conn.execute(
                "SELECT * FROM teachers WHERE teacherid = ?",
                (teacher_id,),
            ).fetchone()
            if row is None:
                return NotFound(teacher_id)
            teacher = row_to_teacher(row)
            if include_courses:
                courses = self._fetch_courses(conn, teacher_id)
                teacher = teacher.model_copy(update={"courses_taught": courses})
        return Found(teacher)

    def list_hired_between(self, min_date: date, max_date: date) -> List[Teacher]:
        """Teachers hired on or after ``min_date`` and on or before ``max_date``."""

        with self._provider.scope() as conn:
            rows = conn.execute(
                """
                SELECT * FROM teachers
                WHERE hiredate IS NOT NULL
                  AND DATE(hiredate) >= ?
                  AND DATE(hiredate) <= ?
                """,
                (_as_date(min_date).isoformat(), _as_date(max_date).isoformat()),
            ).fetchall()
        return [row_to_teacher(row) for row in rows]

    def list_courses(self, teacher_id: int) -> List[Course]:
        """Courses taught by ``teacher_id``; empty for unknown teachers too."""

        with self._provider.scope() as conn:
            return self._fetch_courses(conn, teacher_id)

    def count(self) -> int:
        with self._provider.scope() as conn:
            row = conn.execute("SELECT COUNT(*) AS total FROM teachers").fetchone()
        return int(row["total"])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, teacher: Teacher) -> Outcome[Teacher]:
        missing = teacher.missing_required()
        if missing:
            LOGGER.warning("Rejected teacher create: missing %s", sorted(missing))
            return _missing(missing)

        with self._provider.scope() as conn:
            if self._employee_number_taken(conn, teacher.employee_number):
                LOGGER.warning("Rejected teacher create: %s already in use", teacher.employee_number)
                return _duplicate(teacher.employee_number)
            try:
                cursor = conn.execute(_INSERT_SQL, teacher_values(teacher))
            except sqlite3.IntegrityError as exc:
                if not _is_employee_number_conflict(exc):
                    raise
                # A concurrent insert won after our pre-check passed.
                LOGGER.warning("Unique constraint rejected employee number %s", teacher.employee_number)
                return _duplicate(teacher.employee_number)
            teacher_id = cursor.lastrowid

        LOGGER.info("Created teacher %s (%s)", teacher_id, teacher.employee_number)
        return Found(teacher.model_copy(update={"teacher_id": teacher_id, "courses_taught": None}))

    def update(self, teacher_id: int, teacher: Teacher) -> Outcome[Teacher]:
        """Overwrite every mutable column of ``teacher_id``. Last writer wins."""

        if teacher.teacher_id != teacher_id:
            message = f"Teacher id {teacher.teacher_id} in body does not match id {teacher_id}."
            return Failed(ErrorKind.ID_MISMATCH, message, {"TeacherId": message})
        missing = teacher.missing_required()
        if missing:
            LOGGER.warning("Rejected update of teacher %s: missing %s", teacher_id, sorted(missing))
            return _missing(missing)

        with self._provider.scope() as conn:
            try:
                cursor = conn.execute(_UPDATE_SQL, (*teacher_values(teacher), teacher_id))
            except sqlite3.IntegrityError as exc:
                if not _is_employee_number_conflict(exc):
                    raise
                LOGGER.warning("Rejected update of teacher %s: %s in use", teacher_id, teacher.employee_number)
                return _duplicate(teacher.employee_number)
            if cursor.rowcount == 0:
                return NotFound(teacher_id)

        LOGGER.info("Updated teacher %s", teacher_id)
        return Found(teacher.model_copy(update={"courses_taught": None}))

    def delete(self, teacher_id: int) -> Lookup[int]:
        """Delete a teacher together with its course assignments."""

        with self._provider.scope() as conn:
            conn.execute("DELETE FROM teachers_courses WHERE teacherid = ?", (teacher_id,))
            cursor = conn.execute("DELETE FROM teachers WHERE teacherid = ?", (teacher_id,))
            if cursor.rowcount == 0:
                return NotFound(teacher_id)

        LOGGER.info("Deleted teacher %s", teacher_id)
        return Found(teacher_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _employee_number_taken(self, conn: sqlite3.Connection, employee_number: str | None) -> bool:
        row = conn.execute(
            "SELECT COUNT(*) AS total FROM teachers WHERE employeenumber = ?",
            (employee_number,),
        ).fetchone()
        return int(row["total"]) > 0

    @staticmethod
    def _fetch_courses(conn: sqlite3.Connection, teacher_id: int) -> List[Course]:
        rows = conn.execute(
            """
            SELECT courses.courseid, courses.coursecode, courses.coursename
            FROM teachers_courses
            JOIN courses ON courses.courseid = teachers_courses.courseid
            WHERE teachers_courses.teacherid = ?
            ORDER BY courses.courseid
            """,
            (teacher_id,),
        ).fetchall()
        return [row_to_course(row) for row in rows]


__all__ = ["TeacherRepository"]
