"""FastAPI application exposing teacher records as JSON and HTML pages."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from .config import Settings
from .database import ConnectionProvider, init_db, seed_db
from .routers import pages, teachers
from .services import TeacherRepository

LOGGER = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit :class:`Settings` value.

    Serve with ``uvicorn school.app:create_app --factory``.
    """

    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    provider = ConnectionProvider(settings.database_url, timeout=settings.db_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(provider)
        if settings.seed_demo_data and seed_db(provider):
            LOGGER.info("Demo data loaded into %s", settings.database_url)
        yield

    app = FastAPI(title="School Teacher Records", version="1.0.0", lifespan=lifespan)
    app.state.repository = TeacherRepository(provider)

    app.include_router(teachers.router)
    app.include_router(pages.router)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(sqlite3.Error)
    async def store_exception_handler(request: Request, exc: sqlite3.Error):
        LOGGER.exception("Store error while serving %s %s", request.method, request.url.path, exc_info=exc)
        if request.url.path.startswith(pages.PAGE_PREFIX):
            return pages.render(request, "error.html", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", include_in_schema=False)
    def home() -> RedirectResponse:
        return RedirectResponse(url=app.url_path_for("teacher_list_page"))

    return app


__all__ = ["create_app"]
