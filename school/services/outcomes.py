"""Tagged results returned by the teacher repository."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DUPLICATE_KEY = "duplicate_key"
    ID_MISMATCH = "id_mismatch"


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    """No record matches ``id``. An expected outcome, not a fault."""

    id: int


@dataclass(frozen=True, slots=True)
class Failed:
    """A rejected write. ``fields`` maps JSON field names to messages."""

    kind: ErrorKind
    message: str
    fields: dict[str, str] = field(default_factory=dict)


Lookup = Union[Found[T], NotFound]
Outcome = Union[Found[T], NotFound, Failed]


__all__ = [
    "ErrorKind",
    "Failed",
    "Found",
    "Lookup",
    "NotFound",
    "Outcome",
]
