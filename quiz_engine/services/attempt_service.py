"""
Attempt Service

Quiz attempt lifecycle for students:
- Student view of a quiz (answer key removed, optional shuffling)
- start -> in_progress -> submitted, with attempt caps
- Attempt history and per-attempt results

The caller's identity is always passed in explicitly as `student_id`.
The quiz time limit is advisory: it is returned to clients but a late
submission is scored like any other.
"""

import logging
import math
import random
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quiz_engine.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from quiz_engine.models import (
    AttemptStatus,
    EnrollmentStatus,
    Quiz,
    QuizAttempt,
)
from quiz_engine.repositories.course_repo import EnrollmentRepository
from quiz_engine.repositories.quiz_repo import (
    QuizAnswerRepository,
    QuizAttemptRepository,
    QuizRepository,
)
from quiz_engine.schemas.attempt import (
    AnswerResponse,
    AttemptHistoryResponse,
    AttemptResponse,
    AttemptResultResponse,
    AttemptSummary,
    DetailedResult,
    OptionDetail,
    QuizSubmitRequest,
    QuizSummary,
    StartAttemptResponse,
    SubmitResultResponse,
)
from quiz_engine.schemas.quiz import (
    StudentOptionResponse,
    StudentQuestionResponse,
    StudentQuizResponse,
)
from quiz_engine.services.answer_key import correct_option_indices
from quiz_engine.services.scoring import GradedAnswer, grade_submission, has_passed

logger = logging.getLogger(__name__)

PASSED_MESSAGE = "Congratulations! You passed the quiz!"
FAILED_MESSAGE = "Quiz completed. Keep trying!"


class AttemptService:
    """Service for taking quizzes."""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.quiz_repo = QuizRepository(db)
        self.attempt_repo = QuizAttemptRepository(db)
        self.answer_repo = QuizAnswerRepository(db)
        self.enrollment_repo = EnrollmentRepository(db)
        self.rng = rng or random.Random()

    # ============================================================
    # GET QUIZ (for taking)
    # ============================================================

    async def get_quiz_for_student(self, quiz_id: UUID, student_id: UUID) -> StudentQuizResponse:
        """Quiz without its answer key; options keep their original index."""
        quiz = await self._get_active_quiz(quiz_id)

        enrollment = await self.enrollment_repo.find(
            student_id,
            quiz.course_id,
            statuses=(EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED),
        )
        if not enrollment:
            raise ForbiddenError("You are not enrolled in this course")

        attempt_count = await self.attempt_repo.count_attempts(student_id, quiz_id)
        submitted_count = await self.attempt_repo.count_attempts(
            student_id, quiz_id, status=AttemptStatus.SUBMITTED
        )
        in_progress = await self.attempt_repo.get_in_progress(student_id, quiz_id)
        if submitted_count >= quiz.max_attempts:
            can_attempt = False
        else:
            can_attempt = in_progress is not None or attempt_count < quiz.max_attempts

        questions = list(quiz.questions)
        if quiz.shuffle_questions:
            self.rng.shuffle(questions)

        question_views = []
        for q in questions:
            options = [
                StudentOptionResponse(index=idx, text=opt["text"])
                for idx, opt in enumerate(q.options)
            ]
            if quiz.shuffle_options:
                self.rng.shuffle(options)
            question_views.append(
                StudentQuestionResponse(
                    id=q.id,
                    question_type=q.question_type,
                    question_text=q.question_text,
                    points=q.points,
                    options=options,
                )
            )

        return StudentQuizResponse(
            id=quiz.id,
            course_id=quiz.course_id,
            title=quiz.title,
            description=quiz.description,
            instructions=quiz.instructions,
            passing_score=quiz.passing_score,
            time_limit_minutes=quiz.time_limit_minutes,
            max_attempts=quiz.max_attempts,
            question_count=quiz.question_count,
            total_points=quiz.total_points,
            attempt_count=attempt_count,
            can_attempt=can_attempt,
            questions=question_views,
        )

    # ============================================================
    # START ATTEMPT
    # ============================================================

    async def start_attempt(
        self,
        quiz_id: UUID,
        student_id: UUID,
    ) -> Tuple[StartAttemptResponse, bool]:
        """
        Start an attempt, or hand back the one already in progress.

        Returns the response and whether a new attempt was created.

        Raises:
            NotFoundError: quiz missing or inactive
            ForbiddenError: no active enrollment in the quiz's course
            BadRequestError: attempt cap reached
        """
        quiz = await self._get_active_quiz(quiz_id)

        if not await self.enrollment_repo.is_enrolled(student_id, quiz.course_id):
            raise ForbiddenError("You are not enrolled in this course")

        time_limit = quiz.time_limit_minutes

        # The cap holds even when an attempt is still open
        submitted = await self.attempt_repo.count_attempts(
            student_id, quiz_id, status=AttemptStatus.SUBMITTED
        )
        if submitted >= quiz.max_attempts:
            raise BadRequestError("Maximum attempts reached for this quiz")

        existing = await self.attempt_repo.get_in_progress(student_id, quiz_id)
        if existing:
            return self._start_response(existing, time_limit, "Quiz attempt already in progress"), False

        prior_count = await self.attempt_repo.count_attempts(student_id, quiz_id)
        if prior_count >= quiz.max_attempts:
            raise BadRequestError("Maximum attempts reached for this quiz")

        attempt = QuizAttempt(
            student_id=student_id,
            quiz_id=quiz.id,
            course_id=quiz.course_id,
            attempt_number=prior_count + 1,
            status=AttemptStatus.IN_PROGRESS,
            total_points=0,
            earned_points=0,
            passed=False,
            time_spent=0,
            started_at=_utcnow(),
            answers=[],
        )
        self.attempt_repo.add(attempt)

        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent start claimed this attempt number first
            await self.db.rollback()
            existing = await self.attempt_repo.get_in_progress(student_id, quiz_id)
            if existing is None:
                raise ConflictError("Quiz attempt could not be started, please retry")
            return self._start_response(existing, time_limit, "Quiz attempt already in progress"), False

        logger.info(
            f"Quiz attempt started: student_id={student_id} quiz_id={quiz_id} "
            f"attempt_number={attempt.attempt_number}"
        )
        return self._start_response(attempt, time_limit, "Quiz attempt started"), True

    # ============================================================
    # SUBMIT ATTEMPT
    # ============================================================

    async def submit_attempt(
        self,
        quiz_id: UUID,
        student_id: UUID,
        submission: QuizSubmitRequest,
    ) -> SubmitResultResponse:
        """
        Score and finalize an in-progress attempt.

        Submitting is terminal: a second submission of the same attempt
        fails with NotFoundError and leaves the stored result untouched.
        """
        quiz = await self.quiz_repo.get_by_id(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        attempt = await self.attempt_repo.get_owned(
            submission.attempt_id, student_id, quiz_id, AttemptStatus.IN_PROGRESS
        )
        if not attempt:
            raise NotFoundError("Quiz attempt not found or already submitted")

        questions_by_id = {q.id: q for q in quiz.questions}
        graded = grade_submission(questions_by_id, submission.answers)
        score = graded.score
        passed = has_passed(score, quiz.passing_score)
        submitted_at = _utcnow()
        time_spent = _seconds_between(attempt.started_at, submitted_at)

        finalized = await self.attempt_repo.finalize(
            attempt.id,
            total_points=graded.total_points,
            earned_points=graded.earned_points,
            score=score,
            passed=passed,
            submitted_at=submitted_at,
            time_spent=time_spent,
        )
        if not finalized:
            await self.db.rollback()
            raise NotFoundError("Quiz attempt not found or already submitted")

        self.answer_repo.add_bulk([
            {
                "attempt_id": attempt.id,
                "question_id": answer.question.id,
                "question_text": answer.question.question_text,
                "selected_options": answer.selected_options,
                "is_correct": answer.is_correct,
                "points_earned": answer.points_earned,
                "position": position,
            }
            for position, answer in enumerate(graded.answers)
        ])
        await self.db.commit()
        await self.db.refresh(attempt)

        logger.info(
            f"Quiz submitted: student_id={student_id} quiz_id={quiz_id} "
            f"attempt_id={attempt.id} score={score} passed={passed}"
        )

        detailed_results = None
        if quiz.show_feedback:
            detailed_results = [self._detail_from_graded(a) for a in graded.answers]

        return SubmitResultResponse(
            message=PASSED_MESSAGE if passed else FAILED_MESSAGE,
            score=score,
            earned_points=graded.earned_points,
            total_points=graded.total_points,
            passed=passed,
            time_spent=time_spent,
            attempt_id=attempt.id,
            attempt_number=attempt.attempt_number,
            detailed_results=detailed_results,
        )

    # ============================================================
    # ATTEMPT HISTORY
    # ============================================================

    async def get_history(self, quiz_id: UUID, student_id: UUID) -> AttemptHistoryResponse:
        """Submitted attempts, newest first, with the best score."""
        attempts = await self.attempt_repo.get_submitted(student_id, quiz_id)
        best_score = await self.attempt_repo.get_best_score(student_id, quiz_id)

        return AttemptHistoryResponse(
            count=len(attempts),
            best_score=best_score,
            attempts=[AttemptSummary.model_validate(a) for a in attempts],
        )

    # ============================================================
    # ATTEMPT RESULT
    # ============================================================

    async def get_result(
        self,
        quiz_id: UUID,
        attempt_id: UUID,
        student_id: UUID,
    ) -> AttemptResultResponse:
        """Per-question breakdown of one of the student's submitted attempts."""
        attempt = await self.attempt_repo.get_owned(
            attempt_id, student_id, quiz_id, AttemptStatus.SUBMITTED
        )
        if not attempt:
            raise NotFoundError("Quiz attempt not found")

        quiz = await self.quiz_repo.get_by_id(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        detailed_results = None
        if quiz.show_feedback:
            questions_by_id = {q.id: q for q in quiz.questions}
            detailed_results = []
            for answer in attempt.answers:
                question = questions_by_id.get(answer.question_id)
                detail = DetailedResult(
                    question_id=answer.question_id,
                    question=answer.question_text,
                    selected_options=answer.selected_options,
                    correct_options=sorted(correct_option_indices(question)) if question else [],
                    is_correct=answer.is_correct,
                    points_earned=answer.points_earned,
                    explanation=question.explanation if question else None,
                    all_options=self._all_options(question) if question else None,
                )
                detailed_results.append(detail)

        return AttemptResultResponse(
            attempt=AttemptSummary.model_validate(attempt),
            quiz=QuizSummary(
                title=quiz.title,
                passing_score=quiz.passing_score,
                total_questions=quiz.question_count,
            ),
            detailed_results=detailed_results,
        )

    # ============================================================
    # PRIVATE HELPERS
    # ============================================================

    async def _get_active_quiz(self, quiz_id: UUID) -> Quiz:
        quiz = await self.quiz_repo.get_by_id(quiz_id)
        if not quiz or not quiz.is_active:
            raise NotFoundError("Quiz not found")
        return quiz

    @staticmethod
    def _start_response(
        attempt: QuizAttempt,
        time_limit_minutes: Optional[int],
        message: str,
    ) -> StartAttemptResponse:
        return StartAttemptResponse(
            message=message,
            attempt_id=attempt.id,
            attempt=AttemptResponse(
                id=attempt.id,
                quiz_id=attempt.quiz_id,
                course_id=attempt.course_id,
                student_id=attempt.student_id,
                attempt_number=attempt.attempt_number,
                status=attempt.status.value,
                total_points=attempt.total_points,
                earned_points=attempt.earned_points,
                score=attempt.score,
                passed=attempt.passed,
                started_at=attempt.started_at,
                submitted_at=attempt.submitted_at,
                time_spent=attempt.time_spent,
                time_limit_minutes=time_limit_minutes,
                answers=[AnswerResponse.model_validate(a) for a in attempt.answers],
            ),
        )

    @staticmethod
    def _detail_from_graded(answer: GradedAnswer) -> DetailedResult:
        question = answer.question
        return DetailedResult(
            question_id=question.id,
            question=question.question_text,
            selected_options=answer.selected_options,
            correct_options=sorted(correct_option_indices(question)),
            is_correct=answer.is_correct,
            points_earned=answer.points_earned,
            explanation=question.explanation,
        )

    @staticmethod
    def _all_options(question) -> List[OptionDetail]:
        return [
            OptionDetail(index=idx, text=opt["text"], is_correct=bool(opt.get("is_correct")))
            for idx, opt in enumerate(question.options)
        ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _seconds_between(started_at: datetime, ended_at: datetime) -> int:
    # Some backends hand back naive datetimes; they are stored as UTC
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    return max(0, math.floor((ended_at - started_at).total_seconds()))
