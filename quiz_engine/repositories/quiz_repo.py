"""
Quiz Repository

Data access layer for Quiz, QuizAttempt and QuizAnswer models.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update

from quiz_engine.repositories.base import BaseRepository
from quiz_engine.models.quiz import Quiz
from quiz_engine.models.quiz_attempt import QuizAttempt, AttemptStatus
from quiz_engine.models.quiz_answer import QuizAnswer


class QuizRepository(BaseRepository[Quiz]):
    """Repository for Quiz model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Quiz, db)

    async def get_by_courses(self, course_ids: List[UUID]) -> List[Quiz]:
        if not course_ids:
            return []
        stmt = (
            select(self.model)
            .where(self.model.course_id.in_(course_ids))
            .order_by(self.model.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def has_attempts(self, quiz_id: UUID) -> bool:
        stmt = select(QuizAttempt.id).where(QuizAttempt.quiz_id == quiz_id).limit(1)
        result = await self.db.execute(stmt)
        return result.first() is not None


class QuizAttemptRepository(BaseRepository[QuizAttempt]):
    """Repository for QuizAttempt model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizAttempt, db)

    async def count_attempts(
        self,
        student_id: UUID,
        quiz_id: UUID,
        status: Optional[AttemptStatus] = None,
    ) -> int:
        """Count a student's attempts at a quiz, optionally by status."""
        criteria = [
            self.model.student_id == student_id,
            self.model.quiz_id == quiz_id,
        ]
        if status is not None:
            criteria.append(self.model.status == status)
        return await self.count_where(*criteria)

    async def get_in_progress(self, student_id: UUID, quiz_id: UUID) -> Optional[QuizAttempt]:
        stmt = (
            select(self.model)
            .where(
                self.model.student_id == student_id,
                self.model.quiz_id == quiz_id,
                self.model.status == AttemptStatus.IN_PROGRESS,
            )
            .order_by(self.model.attempt_number.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(
        self,
        attempt_id: UUID,
        student_id: UUID,
        quiz_id: UUID,
        status: AttemptStatus,
    ) -> Optional[QuizAttempt]:
        """Fetch an attempt only if it belongs to the student and quiz and has the status."""
        stmt = select(self.model).where(
            self.model.id == attempt_id,
            self.model.student_id == student_id,
            self.model.quiz_id == quiz_id,
            self.model.status == status,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def finalize(self, attempt_id: UUID, **values) -> bool:
        """
        Mark an in-progress attempt as submitted in a single statement.

        The status check is part of the UPDATE predicate, so of two
        concurrent submissions only one can match. Returns False when no
        row matched. The caller owns the transaction.
        """
        stmt = (
            update(self.model)
            .where(
                self.model.id == attempt_id,
                self.model.status == AttemptStatus.IN_PROGRESS,
            )
            .values(status=AttemptStatus.SUBMITTED, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def get_submitted(self, student_id: UUID, quiz_id: UUID) -> List[QuizAttempt]:
        return await self.list_where(
            self.model.student_id == student_id,
            self.model.quiz_id == quiz_id,
            self.model.status == AttemptStatus.SUBMITTED,
            order_by=self.model.attempt_number.desc(),
        )

    async def get_best_score(self, student_id: UUID, quiz_id: UUID) -> Optional[int]:
        stmt = select(func.max(self.model.score)).where(
            self.model.student_id == student_id,
            self.model.quiz_id == quiz_id,
            self.model.status == AttemptStatus.SUBMITTED,
        )
        result = await self.db.execute(stmt)
        return result.scalar()


class QuizAnswerRepository(BaseRepository[QuizAnswer]):
    """Repository for QuizAnswer model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizAnswer, db)

    def add_bulk(self, answers: List[dict]) -> List[QuizAnswer]:
        """Stage answers in the current transaction without committing."""
        instances = [QuizAnswer(**data) for data in answers]
        self.db.add_all(instances)
        return instances
