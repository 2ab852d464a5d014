"""FastAPI dependencies for shared services."""
from __future__ import annotations

from fastapi import Request

from .services import TeacherRepository


def get_repository(request: Request) -> TeacherRepository:
    """Return the repository built by :func:`school.app.create_app`."""

    return request.app.state.repository
