"""SQLAlchemy model package."""
from school.db.models.course import Course, teachers_courses
from school.db.models.teacher import Teacher

__all__ = [
    "Course",
    "Teacher",
    "teachers_courses",
]
