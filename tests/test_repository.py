"""Data-access behaviour of the teacher repository."""
from __future__ import annotations

import sqlite3
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from school.database import ConnectionProvider
from school.services import ErrorKind, Failed, Found, NotFound, TeacherRepository

from conftest import make_teacher


def test_list_all_on_empty_store_returns_empty_list(repo: TeacherRepository) -> None:
    assert repo.list_all() == []


def test_create_assigns_fresh_positive_ids(repo: TeacherRepository, create_teacher) -> None:
    first = create_teacher(employee_number="T1")
    second = create_teacher(employee_number="T2", first_name="Linda", last_name="Chan")

    assert first.teacher_id > 0
    assert second.teacher_id > 0
    assert first.teacher_id != second.teacher_id
    assert {t.employee_number for t in repo.list_all()} == {"T1", "T2"}


def test_create_ignores_courses_on_the_payload(repo: TeacherRepository) -> None:
    outcome = repo.create(make_teacher(courses_taught=[]))
    assert isinstance(outcome, Found)
    assert outcome.value.courses_taught is None


def test_duplicate_employee_number_is_rejected(repo: TeacherRepository, create_teacher) -> None:
    create_teacher(employee_number="T400")
    before = repo.count()

    outcome = repo.create(make_teacher(employee_number="T400", first_name="Other"))

    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.DUPLICATE_KEY
    assert "T400" in outcome.message
    assert "EmployeeNumber" in outcome.fields
    assert repo.count() == before


@pytest.mark.parametrize(
    ("field", "alias"),
    [
        ("first_name", "TeacherFName"),
        ("last_name", "TeacherLName"),
        ("employee_number", "EmployeeNumber"),
    ],
)
def test_create_requires_names_and_employee_number(repo: TeacherRepository, field: str, alias: str) -> None:
    outcome = repo.create(make_teacher(**{field: ""}))

    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.VALIDATION
    assert list(outcome.fields) == [alias]
    assert repo.count() == 0


def test_validation_failure_does_not_touch_the_store(settings) -> None:
    # No schema exists here: any store access would raise OperationalError.
    repo = TeacherRepository(ConnectionProvider(settings.database_url))
    outcome = repo.create(make_teacher(first_name=None))
    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.VALIDATION


def test_get_round_trips_every_field(repo: TeacherRepository) -> None:
    sent = make_teacher(hire_date=datetime(2016, 8, 5, 9, 30), salary=Decimal("55.3"))
    created = repo.create(sent)
    assert isinstance(created, Found)

    outcome = repo.get(created.value.teacher_id)

    assert isinstance(outcome, Found)
    fetched = outcome.value
    assert fetched.model_dump(exclude={"teacher_id"}) == sent.model_dump(exclude={"teacher_id"})
    assert fetched.salary == Decimal("55.30")
    assert fetched.teacher_id == created.value.teacher_id


def test_null_optionals_round_trip_to_none(repo: TeacherRepository) -> None:
    created = repo.create(make_teacher(hire_date=None, salary=None, work_phone=None))
    assert isinstance(created, Found)

    fetched = repo.get(created.value.teacher_id)

    assert isinstance(fetched, Found)
    assert fetched.value.hire_date is None
    assert fetched.value.salary is None
    assert fetched.value.work_phone is None
    with repo.provider.scope() as conn:
        row = conn.execute(
            "SELECT hiredate, salary, teacherworkphone FROM teachers WHERE teacherid = ?",
            (created.value.teacher_id,),
        ).fetchone()
    assert tuple(row) == (None, None, None)


def test_zero_salary_is_not_treated_as_absent(repo: TeacherRepository, create_teacher) -> None:
    created = create_teacher(salary=Decimal("0"))
    fetched = repo.get(created.teacher_id)
    assert isinstance(fetched, Found)
    assert fetched.value.salary == Decimal("0.00")


def test_salary_round_trips_at_column_precision(repo: TeacherRepository, create_teacher) -> None:
    created = create_teacher(salary=Decimal("99999999.99"))
    assert created.salary == Decimal("99999999.99")

    fetched = repo.get(created.teacher_id)

    assert isinstance(fetched, Found)
    assert fetched.value.salary == created.salary


@pytest.mark.parametrize("salary", ["50.005", "12345678901234567.89"])
def test_salary_beyond_column_precision_is_rejected(repo: TeacherRepository, salary: str) -> None:
    with pytest.raises(ValidationError):
        make_teacher(salary=salary)
    assert repo.count() == 0


def test_get_unknown_id_is_not_found(repo: TeacherRepository) -> None:
    assert repo.get(999) == NotFound(999)


def test_update_overwrites_all_mutable_columns(repo: TeacherRepository, create_teacher) -> None:
    created = create_teacher()
    changed = created.model_copy(
        update={"first_name": "Alex", "salary": None, "work_phone": None, "hire_date": datetime(2017, 1, 9)}
    )

    outcome = repo.update(created.teacher_id, changed)

    assert isinstance(outcome, Found)
    fetched = repo.get(created.teacher_id)
    assert isinstance(fetched, Found)
    assert fetched.value.first_name == "Alex"
    assert fetched.value.salary is None
    assert fetched.value.work_phone is None
    assert fetched.value.hire_date == datetime(2017, 1, 9)


def test_update_with_mismatched_id_changes_nothing(repo: TeacherRepository, create_teacher) -> None:
    created = create_teacher()
    changed = created.model_copy(update={"first_name": "Changed"})

    outcome = repo.update(created.teacher_id + 1, changed)

    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.ID_MISMATCH
    fetched = repo.get(created.teacher_id)
    assert isinstance(fetched, Found)
    assert fetched.value.first_name == "Alexander"


def test_update_of_unknown_id_is_not_found(repo: TeacherRepository, create_teacher) -> None:
    create_teacher()
    before = repo.list_all()

    outcome = repo.update(404, make_teacher(teacher_id=404, employee_number="T999"))

    assert outcome == NotFound(404)
    assert repo.list_all() == before


def test_update_to_taken_employee_number_is_duplicate(repo: TeacherRepository, create_teacher) -> None:
    create_teacher(employee_number="T1")
    second = create_teacher(employee_number="T2")

    outcome = repo.update(second.teacher_id, second.model_copy(update={"employee_number": "T1"}))

    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.DUPLICATE_KEY
    fetched = repo.get(second.teacher_id)
    assert isinstance(fetched, Found)
    assert fetched.value.employee_number == "T2"


def test_update_requires_names(repo: TeacherRepository, create_teacher) -> None:
    created = create_teacher()
    outcome = repo.update(created.teacher_id, created.model_copy(update={"last_name": None}))
    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.VALIDATION


def test_delete_removes_exactly_one_row(repo: TeacherRepository, create_teacher) -> None:
    keep = create_teacher(employee_number="T1")
    gone = create_teacher(employee_number="T2")

    assert repo.delete(gone.teacher_id) == Found(gone.teacher_id)

    assert repo.count() == 1
    assert repo.get(gone.teacher_id) == NotFound(gone.teacher_id)
    assert isinstance(repo.get(keep.teacher_id), Found)


def test_delete_of_unknown_id_is_not_found(repo: TeacherRepository, create_teacher) -> None:
    create_teacher()
    assert repo.delete(12345) == NotFound(12345)
    assert repo.count() == 1


def test_delete_cascades_course_assignments(repo: TeacherRepository, create_teacher, assign_course) -> None:
    gone = create_teacher(employee_number="T1")
    keep = create_teacher(employee_number="T2")
    course_id = assign_course("http5101", "Web Application Development", gone.teacher_id, keep.teacher_id)

    repo.delete(gone.teacher_id)

    with repo.provider.scope() as conn:
        links = conn.execute("SELECT teacherid, courseid FROM teachers_courses").fetchall()
        courses = conn.execute("SELECT COUNT(*) FROM courses").fetchone()[0]
    assert [tuple(link) for link in links] == [(keep.teacher_id, course_id)]
    assert courses == 1


def test_hire_date_range_is_inclusive(repo: TeacherRepository, create_teacher) -> None:
    hires = {
        "T1": datetime(2019, 12, 31, 23, 59),
        "T2": datetime(2020, 1, 1),
        "T3": datetime(2022, 6, 15),
        "T4": datetime(2024, 12, 31, 15, 30),
        "T5": datetime(2025, 1, 1),
        "T6": None,
    }
    for number, hired in hires.items():
        create_teacher(employee_number=number, hire_date=hired)

    matched = repo.list_hired_between(date(2020, 1, 1), date(2024, 12, 31))

    assert sorted(t.employee_number for t in matched) == ["T2", "T3", "T4"]


def test_offset_hire_date_matches_its_local_calendar_day(repo: TeacherRepository, create_teacher) -> None:
    eastern = timezone(timedelta(hours=-5))
    created = create_teacher(hire_date=datetime(2024, 12, 31, 22, 0, tzinfo=eastern))

    matched = repo.list_hired_between(date(2020, 1, 1), date(2024, 12, 31))

    assert [t.teacher_id for t in matched] == [created.teacher_id]
    fetched = repo.get(created.teacher_id)
    assert isinstance(fetched, Found)
    assert fetched.value.hire_date == datetime(2024, 12, 31, 22, 0)


def test_hire_date_range_with_no_matches(repo: TeacherRepository, create_teacher) -> None:
    create_teacher(hire_date=datetime(2016, 8, 5))
    assert repo.list_hired_between(date(2020, 1, 1), date(2024, 12, 31)) == []
    assert repo.list_hired_between(date(2024, 1, 1), date(2020, 1, 1)) == []


def test_courses_for_teacher_without_courses_is_empty(repo: TeacherRepository, create_teacher) -> None:
    teacher = create_teacher()
    assert repo.list_courses(teacher.teacher_id) == []
    assert repo.list_courses(999) == []


def test_courses_for_teacher(repo: TeacherRepository, create_teacher, assign_course) -> None:
    teacher = create_teacher()
    other = create_teacher(employee_number="T2")
    assign_course("http5103", "Web Programming", teacher.teacher_id)
    assign_course("http5104", "Digital Design", other.teacher_id)
    assign_course("http5105", "Database Development", teacher.teacher_id)

    courses = repo.list_courses(teacher.teacher_id)

    assert [(c.code, c.name) for c in courses] == [
        ("http5103", "Web Programming"),
        ("http5105", "Database Development"),
    ]


def test_get_can_include_courses(repo: TeacherRepository, create_teacher, assign_course) -> None:
    teacher = create_teacher()
    assign_course("http5101", "Web Application Development", teacher.teacher_id)

    plain = repo.get(teacher.teacher_id)
    detailed = repo.get(teacher.teacher_id, include_courses=True)

    assert isinstance(plain, Found) and plain.value.courses_taught is None
    assert isinstance(detailed, Found)
    assert [c.code for c in detailed.value.courses_taught] == ["http5101"]


def test_unique_constraint_backs_up_the_pre_check(repo: TeacherRepository, create_teacher, monkeypatch) -> None:
    # Simulate losing the race: the pre-check sees no duplicate.
    create_teacher(employee_number="T400")
    monkeypatch.setattr(repo, "_employee_number_taken", lambda conn, number: False)

    outcome = repo.create(make_teacher(employee_number="T400"))

    assert isinstance(outcome, Failed)
    assert outcome.kind is ErrorKind.DUPLICATE_KEY
    assert repo.count() == 1


def test_concurrent_creates_admit_one_employee_number(repo: TeacherRepository) -> None:
    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(lambda i: repo.create(make_teacher(first_name=f"T{i}")), range(8)))

    assert sum(isinstance(outcome, Found) for outcome in outcomes) == 1
    assert all(
        outcome.kind is ErrorKind.DUPLICATE_KEY for outcome in outcomes if isinstance(outcome, Failed)
    )
    assert repo.count() == 1


def test_store_errors_propagate(settings) -> None:
    repo = TeacherRepository(ConnectionProvider(settings.database_url))
    with pytest.raises(sqlite3.OperationalError):
        repo.list_all()
