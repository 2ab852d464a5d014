from __future__ import annotations

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient

from school.app import create_app
from school.config import Settings
from school.database import ConnectionProvider, init_db
from school.schemas import Teacher
from school.services import Found, TeacherRepository


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{(tmp_path / 'school.db').as_posix()}", db_timeout=5.0)


@pytest.fixture()
def provider(settings: Settings) -> ConnectionProvider:
    provider = ConnectionProvider(settings.database_url, timeout=settings.db_timeout)
    init_db(provider)
    return provider


@pytest.fixture()
def repo(provider: ConnectionProvider) -> TeacherRepository:
    return TeacherRepository(provider)


@pytest.fixture()
def client(settings: Settings, provider: ConnectionProvider) -> Iterator[TestClient]:
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def make_teacher(**overrides) -> Teacher:
    fields = {
        "first_name": "Alexander",
        "last_name": "Bennett",
        "employee_number": "T378",
        "hire_date": datetime(2016, 8, 5),
        "salary": Decimal("55.30"),
        "work_phone": "416-555-0101",
    }
    fields.update(overrides)
    return Teacher(**fields)


@pytest.fixture()
def create_teacher(repo: TeacherRepository) -> Callable[..., Teacher]:
    def _create(**overrides) -> Teacher:
        outcome = repo.create(make_teacher(**overrides))
        assert isinstance(outcome, Found), outcome
        return outcome.value

    return _create


@pytest.fixture()
def assign_course(provider: ConnectionProvider) -> Callable[..., int]:
    """Insert a course and link it to the given teachers; returns the course id."""

    def _assign(code: str, name: str, *teacher_ids: int) -> int:
        with provider.scope() as conn:
            cursor = conn.execute(
                "INSERT INTO courses (coursecode, coursename) VALUES (?, ?)",
                (code, name),
            )
            course_id = cursor.lastrowid
            for teacher_id in teacher_ids:
                conn.execute(
                    "INSERT INTO teachers_courses (teacherid, courseid) VALUES (?, ?)",
                    (teacher_id, course_id),
                )
        return course_id

    return _assign
