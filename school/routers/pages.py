"""Server-rendered teacher pages.

The handlers only translate repository outcomes into views: ``Found`` renders
or redirects, ``NotFound`` renders the not-found page with a 404, and
``Failed`` re-renders the submitted form with field-level messages.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from ..config import TEMPLATES_DIR
from ..dependencies import get_repository
from ..schemas import Teacher, validation_errors_by_field
from ..services import Failed, NotFound, TeacherRepository

PAGE_PREFIX = "/pages/teachers"
FORM_FIELDS = (
    "TeacherFName",
    "TeacherLName",
    "EmployeeNumber",
    "HireDate",
    "Salary",
    "TeacherWorkPhone",
)

router = APIRouter(prefix=PAGE_PREFIX, tags=["pages"], include_in_schema=False)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, status_code: int = status.HTTP_200_OK, **context: Any):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def _not_found_page(request: Request, outcome: NotFound):
    return render(request, "not_found.html", status.HTTP_404_NOT_FOUND, teacher_id=outcome.id)


def _form_page(
    request: Request,
    values: dict[str, str],
    errors: dict[str, str],
    teacher_id: Optional[int] = None,
    status_code: int = status.HTTP_200_OK,
):
    return render(
        request,
        "form.html",
        status_code,
        values=values,
        errors=errors,
        teacher_id=teacher_id,
    )


def _form_values(teacher: Teacher) -> dict[str, str]:
    return {
        "TeacherFName": teacher.first_name or "",
        "TeacherLName": teacher.last_name or "",
        "EmployeeNumber": teacher.employee_number or "",
        "HireDate": teacher.hire_date.date().isoformat() if teacher.hire_date else "",
        "Salary": "" if teacher.salary is None else str(teacher.salary),
        "TeacherWorkPhone": teacher.work_phone or "",
    }


def _failure_errors(outcome: Failed) -> dict[str, str]:
    return dict(outcome.fields) or {"__all__": outcome.message}


async def _read_form(request: Request, *extra: str) -> tuple[dict[str, str], Teacher | None, dict[str, str]]:
    form = await request.form()
    values = {name: str(form.get(name, "")) for name in (*FORM_FIELDS, *extra)}
    try:
        teacher = Teacher.model_validate(values)
    except ValidationError as exc:
        return values, None, validation_errors_by_field(exc.errors())
    return values, teacher, {}


def _parse_day(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    return date.fromisoformat(raw)


@router.get("", response_class=HTMLResponse, name="teacher_list_page")
def list_page(
    request: Request,
    min_value: Optional[str] = Query(None, alias="min"),
    max_value: Optional[str] = Query(None, alias="max"),
    repo: TeacherRepository = Depends(get_repository),
):
    error = None
    try:
        min_date, max_date = _parse_day(min_value), _parse_day(max_value)
    except ValueError:
        min_date = max_date = None
        error = "Dates must use the yyyy-MM-dd format."

    if min_date and max_date:
        teachers = repo.list_hired_between(min_date, max_date)
    else:
        if (min_date or max_date) and error is None:
            error = "Both a start and an end hire date are required to filter."
        teachers = repo.list_all()

    return render(
        request,
        "list.html",
        status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
        teachers=teachers,
        min_value=min_value or "",
        max_value=max_value or "",
        error=error,
    )


@router.get("/new", response_class=HTMLResponse, name="teacher_new_page")
def new_page(request: Request):
    return _form_page(request, values={}, errors={})


@router.post("/new", response_class=HTMLResponse)
async def create_page(request: Request, repo: TeacherRepository = Depends(get_repository)):
    values, teacher, errors = await _read_form(request)
    if teacher is None:
        return _form_page(request, values, errors, status_code=status.HTTP_400_BAD_REQUEST)

    outcome = await run_in_threadpool(repo.create, teacher)
    if isinstance(outcome, Failed):
        return _form_page(
            request, values, _failure_errors(outcome), status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse(
        url=request.url_for("teacher_show_page", teacher_id=outcome.value.teacher_id),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/{teacher_id}", response_class=HTMLResponse, name="teacher_show_page")
def show_page(request: Request, teacher_id: int, repo: TeacherRepository = Depends(get_repository)):
    outcome = repo.get(teacher_id, include_courses=True)
    if isinstance(outcome, NotFound):
        return _not_found_page(request, outcome)
    return render(request, "show.html", teacher=outcome.value)


@router.get("/{teacher_id}/edit", response_class=HTMLResponse, name="teacher_edit_page")
def edit_page(request: Request, teacher_id: int, repo: TeacherRepository = Depends(get_repository)):
    outcome = repo.get(teacher_id)
    if isinstance(outcome, NotFound):
        return _not_found_page(request, outcome)
    return _form_page(request, _form_values(outcome.value), errors={}, teacher_id=teacher_id)


@router.post("/{teacher_id}/edit", response_class=HTMLResponse)
async def update_page(
    request: Request, teacher_id: int, repo: TeacherRepository = Depends(get_repository)
):
    values, teacher, errors = await _read_form(request, "TeacherId")
    if teacher is None:
        return _form_page(
            request, values, errors, teacher_id=teacher_id, status_code=status.HTTP_400_BAD_REQUEST
        )

    outcome = await run_in_threadpool(repo.update, teacher_id, teacher)
    if isinstance(outcome, NotFound):
        return _not_found_page(request, outcome)
    if isinstance(outcome, Failed):
        return _form_page(
            request,
            values,
            _failure_errors(outcome),
            teacher_id=teacher_id,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return RedirectResponse(
        url=request.url_for("teacher_show_page", teacher_id=teacher_id),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/{teacher_id}/delete", response_class=HTMLResponse, name="teacher_delete_page")
def confirm_delete_page(
    request: Request, teacher_id: int, repo: TeacherRepository = Depends(get_repository)
):
    outcome = repo.get(teacher_id)
    if isinstance(outcome, NotFound):
        return _not_found_page(request, outcome)
    return render(request, "delete.html", teacher=outcome.value)


@router.post("/{teacher_id}/delete", response_class=HTMLResponse)
def delete_page(request: Request, teacher_id: int, repo: TeacherRepository = Depends(get_repository)):
    outcome = repo.delete(teacher_id)
    if isinstance(outcome, NotFound):
        return _not_found_page(request, outcome)
    return RedirectResponse(
        url=request.url_for("teacher_list_page"),
        status_code=status.HTTP_303_SEE_OTHER,
    )


__all__ = ["PAGE_PREFIX", "render", "router", "templates"]
