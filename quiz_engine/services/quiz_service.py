"""
Quiz Service

Business logic for quiz authoring:
- Trainer access checks against the course catalogue
- Create / update / duplicate with answer key validation
- Deletion guarded against quizzes that already have attempts
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.core.config import settings
from quiz_engine.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from quiz_engine.models import Course, Quiz, QuizQuestion, User, UserRole
from quiz_engine.repositories.course_repo import CourseRepository
from quiz_engine.repositories.quiz_repo import QuizRepository
from quiz_engine.schemas.quiz import (
    QuestionCreate,
    QuizCreate,
    QuizDetailResponse,
    QuizListResponse,
    QuizResponse,
    QuizUpdate,
)
from quiz_engine.services.answer_key import ensure_valid

logger = logging.getLogger(__name__)

# Columns that may not be cleared by sending null in an update
_REQUIRED_FIELDS = {
    "title",
    "passing_score",
    "max_attempts",
    "shuffle_questions",
    "shuffle_options",
    "show_feedback",
    "is_active",
}

_TITLE_MAX_LENGTH = 200


class QuizService:
    """Service for quiz authoring by trainers."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.quiz_repo = QuizRepository(db)
        self.course_repo = CourseRepository(db)

    # ============================================================
    # LIST QUIZZES
    # ============================================================

    async def list_quizzes(self, trainer: User) -> QuizListResponse:
        """All quizzes of the courses the trainer can manage."""
        if trainer.role == UserRole.ADMIN:
            course_ids = await self.course_repo.get_all_ids()
        else:
            course_ids = await self.course_repo.get_ids_for_instructor(trainer.id)

        quizzes = await self.quiz_repo.get_by_courses(course_ids)
        return self._build_list_response(quizzes)

    async def list_course_quizzes(self, course_id: UUID, trainer: User) -> QuizListResponse:
        await self._get_accessible_course(course_id, trainer)
        quizzes = await self.quiz_repo.get_by_courses([course_id])
        return self._build_list_response(quizzes)

    # ============================================================
    # GET QUIZ
    # ============================================================

    async def get_quiz(self, quiz_id: UUID, trainer: User) -> QuizDetailResponse:
        quiz = await self._get_accessible_quiz(quiz_id, trainer)
        return QuizDetailResponse.model_validate(quiz)

    # ============================================================
    # CREATE QUIZ
    # ============================================================

    async def create_quiz(self, data: QuizCreate, trainer: User) -> QuizDetailResponse:
        await self._get_accessible_course(data.course_id, trainer)
        ensure_valid(data.questions)

        quiz = Quiz(
            course_id=data.course_id,
            module_id=data.module_id,
            session_id=data.session_id,
            group_id=data.group_id,
            title=data.title,
            description=data.description,
            instructions=data.instructions,
            passing_score=_default(data.passing_score, settings.DEFAULT_PASSING_SCORE),
            time_limit_minutes=data.time_limit_minutes,
            max_attempts=_default(data.max_attempts, settings.DEFAULT_MAX_ATTEMPTS),
            shuffle_questions=_default(data.shuffle_questions, False),
            shuffle_options=_default(data.shuffle_options, False),
            show_feedback=_default(data.show_feedback, True),
            is_active=True,
            created_by=trainer.id,
            questions=self._build_questions(data.questions),
        )
        self.quiz_repo.add(quiz)
        await self.db.commit()

        logger.info(
            f"Quiz created: quiz_id={quiz.id} course_id={quiz.course_id} "
            f"questions={quiz.question_count} trainer_id={trainer.id}"
        )
        return QuizDetailResponse.model_validate(quiz)

    # ============================================================
    # UPDATE QUIZ
    # ============================================================

    async def update_quiz(
        self,
        quiz_id: UUID,
        data: QuizUpdate,
        trainer: User,
    ) -> QuizDetailResponse:
        quiz = await self._get_accessible_quiz(quiz_id, trainer)

        update_data = data.model_dump(exclude_unset=True, exclude={"questions"})
        if data.questions is not None:
            ensure_valid(data.questions)

        for key, value in update_data.items():
            if value is None and key in _REQUIRED_FIELDS:
                continue
            setattr(quiz, key, value)

        if data.questions is not None:
            existing = {q.id: q for q in quiz.questions}
            quiz.questions = self._build_questions(data.questions, existing)

        await self.db.commit()
        await self.db.refresh(quiz)

        logger.info(f"Quiz updated: quiz_id={quiz.id} fields={sorted(update_data)}")
        return QuizDetailResponse.model_validate(quiz)

    # ============================================================
    # DELETE QUIZ
    # ============================================================

    async def delete_quiz(self, quiz_id: UUID, trainer: User) -> bool:
        quiz = await self._get_accessible_quiz(quiz_id, trainer)

        if await self.quiz_repo.has_attempts(quiz.id):
            raise ConflictError(
                "Quiz has attempts and cannot be deleted; deactivate it instead"
            )

        deleted = await self.quiz_repo.delete(quiz.id)
        logger.info(f"Quiz deleted: quiz_id={quiz_id} trainer_id={trainer.id}")
        return deleted

    # ============================================================
    # DUPLICATE QUIZ
    # ============================================================

    async def duplicate_quiz(self, quiz_id: UUID, trainer: User) -> QuizDetailResponse:
        source = await self._get_accessible_quiz(quiz_id, trainer)
        ensure_valid(source.questions)

        title = f"{source.title} (Copy)"
        copy = Quiz(
            course_id=source.course_id,
            module_id=source.module_id,
            session_id=source.session_id,
            group_id=source.group_id,
            title=title[:_TITLE_MAX_LENGTH],
            description=source.description,
            instructions=source.instructions,
            passing_score=source.passing_score,
            time_limit_minutes=source.time_limit_minutes,
            max_attempts=source.max_attempts,
            shuffle_questions=source.shuffle_questions,
            shuffle_options=source.shuffle_options,
            show_feedback=source.show_feedback,
            is_active=source.is_active,
            created_by=trainer.id,
            questions=[
                QuizQuestion(
                    question_type=q.question_type,
                    question_text=q.question_text,
                    options=[dict(opt) for opt in q.options],
                    explanation=q.explanation,
                    points=q.points,
                    display_order=q.display_order,
                )
                for q in source.questions
            ],
        )
        self.quiz_repo.add(copy)
        await self.db.commit()

        logger.info(f"Quiz duplicated: source_id={source.id} copy_id={copy.id}")
        return QuizDetailResponse.model_validate(copy)

    # ============================================================
    # PRIVATE HELPERS
    # ============================================================

    async def _get_accessible_course(self, course_id: UUID, trainer: User) -> Course:
        course = await self.course_repo.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        if not self._can_manage(course, trainer):
            raise ForbiddenError("You do not have access to this course")
        return course

    async def _get_accessible_quiz(self, quiz_id: UUID, trainer: User) -> Quiz:
        quiz = await self.quiz_repo.get_by_id(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        course = await self.course_repo.get_by_id(quiz.course_id)
        if not course or not self._can_manage(course, trainer):
            raise ForbiddenError("You do not have access to this quiz")
        return quiz

    @staticmethod
    def _can_manage(course: Course, trainer: User) -> bool:
        return trainer.role == UserRole.ADMIN or course.instructor_id == trainer.id

    @staticmethod
    def _build_questions(
        questions: List[QuestionCreate],
        existing: Optional[Dict[UUID, QuizQuestion]] = None,
    ) -> List[QuizQuestion]:
        """Turn request questions into rows, reusing rows whose id was sent back."""
        # Each stored row is reused at most once; repeated ids get fresh rows
        unclaimed = dict(existing or {})
        rows = []

        for order, q in enumerate(questions):
            row = unclaimed.pop(q.id, None) if q.id else None
            if row is None:
                row = QuizQuestion()
            row.question_type = q.question_type.value
            row.question_text = q.question_text
            row.options = [opt.model_dump() for opt in q.options]
            row.explanation = q.explanation
            row.points = q.points
            row.display_order = order
            rows.append(row)

        return rows

    @staticmethod
    def _build_list_response(quizzes: List[Quiz]) -> QuizListResponse:
        return QuizListResponse(
            quizzes=[QuizResponse.model_validate(q) for q in quizzes],
            count=len(quizzes),
        )


def _default(value, fallback):
    return fallback if value is None else value
