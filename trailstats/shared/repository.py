"""
Base repository for storage adapters.

Usage:
    class SavedTrackRepository(BaseRepository[SavedTrackRecord]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, SavedTrackRecord)
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Async CRUD helpers over one model.

    Callers own the transaction: methods flush, never commit.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: str) -> T | None:
        """Row with this primary key, or None."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> T:
        """
        Insert a row.

        Returns:
            The new row with server/default values (ID, timestamps) loaded
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **kwargs) -> T:
        """Set fields on a loaded row and flush."""
        for key, value in kwargs.items():
            setattr(entity, key, value)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity
