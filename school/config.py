"""Application configuration settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent
DATA_DIR: Final[Path] = BASE_DIR / "data"
TEMPLATES_DIR: Final[Path] = Path(__file__).resolve().parent / "templates"

DEFAULT_DATABASE_URL: Final[str] = f"sqlite:///{(DATA_DIR / 'school.db').as_posix()}"
DEFAULT_DB_TIMEOUT: Final[float] = 5.0
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration handed to :func:`school.app.create_app`."""

    database_url: str = DEFAULT_DATABASE_URL
    db_timeout: float = DEFAULT_DB_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    seed_demo_data: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = float(os.getenv("SCHOOL_DB_TIMEOUT", DEFAULT_DB_TIMEOUT))
        if timeout <= 0:
            raise ValueError("SCHOOL_DB_TIMEOUT must be greater than zero")
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            db_timeout=timeout,
            log_level=os.getenv("SCHOOL_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            seed_demo_data=os.getenv("SCHOOL_SEED_DEMO_DATA", "0").strip().lower() in _TRUTHY,
        )


__all__ = [
    "BASE_DIR",
    "DATA_DIR",
    "DEFAULT_DATABASE_URL",
    "Settings",
    "TEMPLATES_DIR",
]
