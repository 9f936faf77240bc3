from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import User
from askbot.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for working with User models."""

    def __init__(self):
        super().__init__(User)

    async def get_or_create_user(self, session: AsyncSession, user_id: int, username: str) -> tuple[User, bool]:
        """Return the user, creating it on first interaction."""
        user = await self.get(session, user_id)
        if user:
            return user, False

        user = User(id=user_id, username=username, points=0, questions_asked=0, answers_given=0)
        session.add(user)
        await session.flush()
        return user, True

    async def increment(self, session: AsyncSession, user_id: int, **deltas: int) -> bool:
        """Atomically add to counter columns (points, questions_asked, answers_given)."""
        values = {name: getattr(User, name) + delta for name, delta in deltas.items()}
        result = await session.execute(update(User).where(User.id == user_id).values(**values))
        return result.rowcount > 0

    async def get_ranked(self, session: AsyncSession, limit: int | None = None) -> list[User]:
        """Users ordered by points, ties broken by join order."""
        query = (
            select(User)
            .order_by(User.points.desc(), User.join_date, User.id)
            .execution_options(populate_existing=True)
        )
        if limit:
            query = query.limit(limit)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_ranked_ids(self, session: AsyncSession) -> list[int]:
        """Same ordering as get_ranked, ids only."""
        query = select(User.id).order_by(User.points.desc(), User.join_date, User.id)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def count_joined_since(self, session: AsyncSession, since: datetime) -> int:
        return await self.count(session, User.join_date >= since)


# Create a singleton instance
user_repo = UserRepository()
