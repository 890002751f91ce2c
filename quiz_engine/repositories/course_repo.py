"""
Course and Enrollment Repositories

Read-side access to the course catalogue and enrollments. Both are owned
by other parts of the platform; the quiz engine only consults them.
"""

from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from quiz_engine.repositories.base import BaseRepository
from quiz_engine.models.course import Course
from quiz_engine.models.enrollment import Enrollment, EnrollmentStatus


class CourseRepository(BaseRepository[Course]):
    """Repository for Course model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Course, db)

    async def get_ids_for_instructor(self, instructor_id: UUID) -> List[UUID]:
        stmt = select(self.model.id).where(self.model.instructor_id == instructor_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_all_ids(self) -> List[UUID]:
        result = await self.db.execute(select(self.model.id))
        return list(result.scalars().all())


class EnrollmentRepository(BaseRepository[Enrollment]):
    """Repository for Enrollment model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Enrollment, db)

    async def find(
        self,
        student_id: UUID,
        course_id: UUID,
        statuses: Iterable[EnrollmentStatus] = (EnrollmentStatus.ACTIVE,),
    ) -> Optional[Enrollment]:
        stmt = select(self.model).where(
            self.model.student_id == student_id,
            self.model.course_id == course_id,
            self.model.status.in_(list(statuses)),
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def is_enrolled(self, student_id: UUID, course_id: UUID) -> bool:
        """True when the student holds an active enrollment in the course."""
        return await self.find(student_id, course_id) is not None
