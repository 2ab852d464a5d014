"""Course table and the teacher/course join table."""
from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school.db import Base

teachers_courses = Table(
    "teachers_courses",
    Base.metadata,
    Column(
        "teacherid",
        Integer,
        ForeignKey("teachers.teacherid", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "courseid",
        Integer,
        ForeignKey("courses.courseid", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Course(Base):
    """A course that one or more teachers teach."""

    __tablename__ = "courses"

    courseid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coursecode: Mapped[str] = mapped_column(String(32), nullable=False)
    coursename: Mapped[str] = mapped_column(String(255), nullable=False)

    teachers: Mapped[list["Teacher"]] = relationship(
        "Teacher",
        secondary=teachers_courses,
        back_populates="courses",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - repr not critical
        return f"Course(courseid={self.courseid!r}, coursecode={self.coursecode!r})"
