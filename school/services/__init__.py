"""Convenient re-exports for the service layer."""
from __future__ import annotations

from .outcomes import ErrorKind, Failed, Found, Lookup, NotFound, Outcome
from .teacher_repository import TeacherRepository

__all__ = [
    "ErrorKind",
    "Failed",
    "Found",
    "Lookup",
    "NotFound",
    "Outcome",
    "TeacherRepository",
]
