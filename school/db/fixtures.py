"""Development fixture helpers."""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from school.db.models import Course, Teacher

LOGGER = logging.getLogger(__name__)

DEMO_COURSES = [
    ("http5101", "Web Application Development"),
    ("http5102", "Project Management"),
    ("http5103", "Web Programming"),
    ("http5104", "Digital Design"),
    ("http5105", "Database Development"),
]

# (first, last, employee number, hire date, salary, work phone, course codes)
DEMO_TEACHERS = [
    ("Alexander", "Bennett", "T378", datetime(2016, 8, 5), Decimal("55.30"), "416-555-0101", ["http5101"]),
    ("Caitlin", "Cummings", "T381", datetime(2014, 6, 10), Decimal("62.77"), None, ["http5102", "http5105"]),
    ("Linda", "Chan", "T382", datetime(2015, 8, 22), Decimal("60.22"), "416-555-0142", ["http5103"]),
    ("Lauren", "Smith", "T385", datetime(2014, 6, 22), Decimal("74.20"), None, ["http5104"]),
    ("Jessica", "Morris", "T389", datetime(2012, 6, 4), Decimal("48.62"), None, []),
]


def seed_demo_data(session: Session) -> bool:
    """Populate an empty database with demo courses, teachers and assignments.

    Returns ``True`` when rows were added and ``False`` when teachers already
    exist, leaving the database untouched.
    """
    existing = session.scalar(select(func.count()).select_from(Teacher))
    if existing:
        return False

    courses = {code: Course(coursecode=code, coursename=name) for code, name in DEMO_COURSES}
    session.add_all(courses.values())

    for first, last, number, hired, salary, phone, codes in DEMO_TEACHERS:
        teacher = Teacher(
            teacherfname=first,
            teacherlname=last,
            employeenumber=number,
            hiredate=hired,
            salary=salary,
            teacherworkphone=phone,
        )
        teacher.courses = [courses[code] for code in codes]
        session.add(teacher)

    session.flush()
    LOGGER.info("Seeded %d demo teachers", len(DEMO_TEACHERS))
    return True
