"""
Student Quiz Endpoints

HTTP API for taking quizzes.

Endpoints:
----------
- GET    /student/quizzes/{quiz_id}                       - Get quiz (no answer key)
- POST   /student/quizzes/{quiz_id}/start                 - Start or resume an attempt
- POST   /student/quizzes/{quiz_id}/submit                - Submit answers for scoring
- GET    /student/quizzes/{quiz_id}/attempts              - Submitted attempt history
- GET    /student/quizzes/{quiz_id}/results/{attempt_id}  - Result of one attempt
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.db.database import get_db
from quiz_engine.api.deps import get_current_user
from quiz_engine.core.exceptions import AppError
from quiz_engine.models.user import User
from quiz_engine.schemas.attempt import (
    AttemptHistoryResponse,
    AttemptResultResponse,
    QuizSubmitRequest,
    StartAttemptResponse,
    SubmitResultResponse,
)
from quiz_engine.schemas.quiz import StudentQuizResponse
from quiz_engine.services.attempt_service import AttemptService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Student Quizzes"])


def get_attempt_service(db: AsyncSession = Depends(get_db)) -> AttemptService:
    return AttemptService(db)


def _to_http(error: AppError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


# ============================================================
# GET QUIZ (for taking)
# ============================================================

@router.get(
    "/{quiz_id}",
    response_model=StudentQuizResponse,
    summary="Get quiz for taking",
    description="Returns the quiz without correct answers. Option indices refer to the authored order.",
)
async def get_quiz(
    quiz_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AttemptService = Depends(get_attempt_service),
):
    try:
        return await service.get_quiz_for_student(quiz_id, current_user.id)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# START ATTEMPT
# ============================================================

@router.post(
    "/{quiz_id}/start",
    response_model=StartAttemptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a quiz attempt",
    description="""
    Creates a new in-progress attempt. If one is already in progress it is
    returned instead (200) so a client retry never opens a second attempt.
    """,
    responses={
        200: {"description": "Existing in-progress attempt returned"},
        400: {"description": "Maximum attempts reached"},
        403: {"description": "Not enrolled in the course"},
        404: {"description": "Quiz not found"},
    },
)
async def start_attempt(
    quiz_id: UUID,
    response: Response,
    current_user: User = Depends(get_current_user),
    service: AttemptService = Depends(get_attempt_service),
):
    try:
        result, created = await service.start_attempt(quiz_id, current_user.id)
    except AppError as e:
        raise _to_http(e)

    if not created:
        response.status_code = status.HTTP_200_OK
    return result


# ============================================================
# SUBMIT ATTEMPT
# ============================================================

@router.post(
    "/{quiz_id}/submit",
    response_model=SubmitResultResponse,
    summary="Submit quiz answers",
    description="""
    Scores the answers of an in-progress attempt and finalizes it.
    Per-question feedback is included only when the quiz shows feedback.
    """,
    responses={
        400: {"description": "Missing attempt id or answers"},
        404: {"description": "Attempt not found or already submitted"},
    },
)
async def submit_attempt(
    quiz_id: UUID,
    submission: QuizSubmitRequest,
    current_user: User = Depends(get_current_user),
    service: AttemptService = Depends(get_attempt_service),
):
    try:
        return await service.submit_attempt(quiz_id, current_user.id, submission)
    except AppError as e:
        raise _to_http(e)


# ============================================================
# ATTEMPT HISTORY
# ============================================================

@router.get(
    "/{quiz_id}/attempts",
    response_model=AttemptHistoryResponse,
    summary="List submitted attempts",
)
async def get_attempts(
    quiz_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AttemptService = Depends(get_attempt_service),
):
    return await service.get_history(quiz_id, current_user.id)


# ============================================================
# ATTEMPT RESULT
# ============================================================

@router.get(
    "/{quiz_id}/results/{attempt_id}",
    response_model=AttemptResultResponse,
    summary="Get detailed attempt results",
)
async def get_results(
    quiz_id: UUID,
    attempt_id: UUID,
    current_user: User = Depends(get_current_user),
    service: AttemptService = Depends(get_attempt_service),
):
    try:
        return await service.get_result(quiz_id, attempt_id, current_user.id)
    except AppError as e:
        raise _to_http(e)
