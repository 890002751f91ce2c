"""
User Repository

Accounts are provisioned outside the quiz engine; this repository only
looks users up and records sign-ins.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from quiz_engine.repositories.base import BaseRepository
from quiz_engine.models import User


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        # Emails are stored lowercased
        result = await self.db.execute(
            select(self.model).where(self.model.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def record_login(self, user: User) -> User:
        user.last_login = datetime.now(timezone.utc)
        await self.db.commit()
        return user
