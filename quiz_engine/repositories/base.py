"""
Base Repository

Generic base class for all repositories. Reads go through here; writes are
staged on the session and committed by the service that owns the unit of
work, except for `delete`, which commits on its own.
"""

from typing import Generic, TypeVar, Type, Optional, List, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from quiz_engine.db.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with the queries every aggregate needs.

    Args:
        model: SQLAlchemy model class
        db: Database session
    """
    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    # -----------------------------
    # Lookup by primary key
    # -----------------------------
    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    # -----------------------------
    # Filtered reads
    # -----------------------------
    async def list_where(self, *criteria, order_by=None) -> List[ModelType]:
        """All rows matching the criteria, optionally ordered."""
        query = select(self.model).where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_where(self, *criteria) -> int:
        result = await self.db.execute(
            select(func.count(self.model.id)).where(*criteria)
        )
        return result.scalar() or 0

    # -----------------------------
    # Writes
    # -----------------------------
    def add(self, instance: ModelType) -> ModelType:
        """Stage a new row; the caller commits."""
        self.db.add(instance)
        return instance

    async def delete(self, id: Any) -> bool:
        instance = await self.get_by_id(id)
        if not instance:
            return False

        await self.db.delete(instance)
        await self.db.commit()
        return True
