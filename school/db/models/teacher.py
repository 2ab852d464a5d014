"""Teacher table definition."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school.db import Base


class Teacher(Base):
    """A member of teaching staff, keyed by a store-assigned id."""

    __tablename__ = "teachers"
    __table_args__ = (UniqueConstraint("employeenumber", name="uq_teachers_employeenumber"),)

    teacherid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacherfname: Mapped[str] = mapped_column(String(255), nullable=False)
    teacherlname: Mapped[str] = mapped_column(String(255), nullable=False)
    employeenumber: Mapped[str] = mapped_column(String(10), nullable=False)
    hiredate: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    teacherworkphone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    courses: Mapped[list["Course"]] = relationship(
        "Course",
        secondary="teachers_courses",
        back_populates="teachers",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - repr not critical
        return f"Teacher(teacherid={self.teacherid!r}, employeenumber={self.employeenumber!r})"
