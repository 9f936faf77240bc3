from typing import Generic, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Shared lookups for a single model. Writes are flushed, never committed here."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, session: AsyncSession, obj_id: int) -> ModelType | None:
        """Get a row by primary key."""
        return await session.get(self.model, obj_id)

    async def get_for_update(self, session: AsyncSession, obj_id: int) -> ModelType | None:
        """Get a row by primary key, bypassing the identity map."""
        return await session.get(self.model, obj_id, populate_existing=True)

    async def count(self, session: AsyncSession, *criteria) -> int:
        """Count rows matching the given criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        result = await session.execute(query)
        return result.scalar_one() or 0

    async def delete(self, session: AsyncSession, obj_id: int) -> bool:
        """Delete a row by primary key."""
        result = await session.execute(delete(self.model).where(self.model.id == obj_id))
        return result.rowcount > 0
