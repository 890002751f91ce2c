"""
Trainer Quiz Endpoints

HTTP API for quiz authoring. Every route requires a trainer or admin.

Endpoints:
----------
- GET    /trainer/quizzes                       - Quizzes of the trainer's courses
- GET    /trainer/quizzes/course/{course_id}    - Quizzes of one course
- POST   /trainer/quizzes                       - Create a quiz
- GET    /trainer/quizzes/{quiz_id}             - Quiz with answer key
- PUT    /trainer/quizzes/{quiz_id}             - Update a quiz
- DELETE /trainer/quizzes/{quiz_id}             - Delete a quiz without attempts
- POST   /trainer/quizzes/{quiz_id}/duplicate   - Copy a quiz
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.db.database import get_db
from quiz_engine.api.deps import require_trainer
from quiz_engine.core.exceptions import AppError
from quiz_engine.models.user import User
from quiz_engine.schemas.quiz import (
    QuizCreate,
    QuizDetailResponse,
    QuizListResponse,
    QuizUpdate,
)
from quiz_engine.services.quiz_service import QuizService

# ============================================================
# Router Setup
# ============================================================
router = APIRouter(tags=["Trainer Quizzes"])


def get_quiz_service(db: AsyncSession = Depends(get_db)) -> QuizService:
    return QuizService(db)


def _to_http(error: AppError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


# ============================================================
# List Quizzes
# ============================================================
@router.get(
    "",
    response_model=QuizListResponse,
    summary="List quizzes of the trainer's courses",
)
async def list_quizzes(
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    return await service.list_quizzes(trainer)


@router.get(
    "/course/{course_id}",
    response_model=QuizListResponse,
    summary="List quizzes of a course",
)
async def list_course_quizzes(
    course_id: UUID,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.list_course_quizzes(course_id, trainer)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# Create Quiz
# ============================================================
@router.post(
    "",
    response_model=QuizDetailResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid questions"},
        403: {"description": "No access to the course"},
        404: {"description": "Course not found"},
    },
)
async def create_quiz(
    quiz_data: QuizCreate,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    """
    Create a quiz for a course the trainer teaches.

    Each question needs at least two options and one correct option;
    single choice questions exactly one.
    """
    try:
        return await service.create_quiz(quiz_data, trainer)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# Get Quiz
# ============================================================
@router.get(
    "/{quiz_id}",
    response_model=QuizDetailResponse,
)
async def get_quiz(
    quiz_id: UUID,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    """Get a quiz including its answer key."""
    try:
        return await service.get_quiz(quiz_id, trainer)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# Update Quiz
# ============================================================
@router.put(
    "/{quiz_id}",
    response_model=QuizDetailResponse,
)
async def update_quiz(
    quiz_id: UUID,
    quiz_data: QuizUpdate,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    """
    Update quiz settings and, optionally, replace its questions.

    Send a question's `id` back to keep its identity across edits.
    """
    try:
        return await service.update_quiz(quiz_id, quiz_data, trainer)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# Delete Quiz
# ============================================================
@router.delete(
    "/{quiz_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={409: {"description": "Quiz already has attempts"}},
)
async def delete_quiz(
    quiz_id: UUID,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        await service.delete_quiz(quiz_id, trainer)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# Duplicate Quiz
# ============================================================
@router.post(
    "/{quiz_id}/duplicate",
    response_model=QuizDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_quiz(
    quiz_id: UUID,
    trainer: User = Depends(require_trainer),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        return await service.duplicate_quiz(quiz_id, trainer)
    except AppError as e:
        raise _to_http(e)
