"""JSON endpoints for teacher records."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..dependencies import get_repository
from ..schemas import Course, Teacher
from ..services import Failed, NotFound, TeacherRepository

router = APIRouter(prefix="/teacher", tags=["teacher"])


def _not_found(outcome: NotFound) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Teacher with ID {outcome.id} not found.",
    )


def _rejected(outcome: Failed) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.message)


@router.get("", response_model=list[Teacher])
def list_teachers(repo: TeacherRepository = Depends(get_repository)) -> list[Teacher]:
    return repo.list_all()


@router.get("/hired", response_model=list[Teacher])
def list_teachers_hired_between(
    min_date: date = Query(..., alias="min", description="Earliest hire date, yyyy-MM-dd"),
    max_date: date = Query(..., alias="max", description="Latest hire date, yyyy-MM-dd"),
    repo: TeacherRepository = Depends(get_repository),
) -> list[Teacher]:
    return repo.list_hired_between(min_date, max_date)


@router.get("/{teacher_id}", response_model=Teacher)
def get_teacher(
    teacher_id: int,
    include_courses: bool = False,
    repo: TeacherRepository = Depends(get_repository),
) -> Teacher:
    outcome = repo.get(teacher_id, include_courses=include_courses)
    if isinstance(outcome, NotFound):
        raise _not_found(outcome)
    return outcome.value


@router.get("/{teacher_id}/courses", response_model=list[Course])
def list_teacher_courses(
    teacher_id: int, repo: TeacherRepository = Depends(get_repository)
) -> list[Course]:
    return repo.list_courses(teacher_id)


@router.post("", response_model=Teacher, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: Teacher,
    request: Request,
    response: Response,
    repo: TeacherRepository = Depends(get_repository),
) -> Teacher:
    # Ids are assigned by the store; anything sent in the body is ignored.
    outcome = repo.create(payload.model_copy(update={"teacher_id": None}))
    if isinstance(outcome, Failed):
        raise _rejected(outcome)
    created = outcome.value
    response.headers["Location"] = str(request.url_for("get_teacher", teacher_id=created.teacher_id))
    return created


@router.put("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_teacher(
    teacher_id: int,
    payload: Teacher,
    repo: TeacherRepository = Depends(get_repository),
) -> Response:
    outcome = repo.update(teacher_id, payload)
    if isinstance(outcome, Failed):
        raise _rejected(outcome)
    if isinstance(outcome, NotFound):
        raise _not_found(outcome)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teacher(teacher_id: int, repo: TeacherRepository = Depends(get_repository)) -> Response:
    outcome = repo.delete(teacher_id)
    if isinstance(outcome, NotFound):
        raise _not_found(outcome)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = [
    "create_teacher",
    "delete_teacher",
    "get_teacher",
    "list_teacher_courses",
    "list_teachers",
    "list_teachers_hired_between",
    "router",
    "update_teacher",
]
