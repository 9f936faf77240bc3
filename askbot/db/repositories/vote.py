from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import Vote
from askbot.db.repositories.base import BaseRepository


class VoteRepository(BaseRepository[Vote]):
    """Repository for working with Vote models."""

    def __init__(self):
        super().__init__(Vote)

    async def get_vote(self, session: AsyncSession, user_id: int, answer_id: int) -> Vote | None:
        query = select(Vote).where(Vote.user_id == user_id, Vote.answer_id == answer_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_user_votes(self, session: AsyncSession, user_id: int, answer_ids: list[int]) -> dict[int, int]:
        """Map answer id -> the user's signed vote, for the given answers."""
        if not answer_ids:
            return {}
        query = select(Vote.answer_id, Vote.value).where(Vote.user_id == user_id, Vote.answer_id.in_(answer_ids))
        result = await session.execute(query)
        return {answer_id: value for answer_id, value in result.all()}

    async def add_vote(self, session: AsyncSession, user_id: int, answer_id: int, value: int) -> Vote:
        vote = Vote(user_id=user_id, answer_id=answer_id, value=value)
        session.add(vote)
        await session.flush()
        return vote

    async def remove_vote(self, session: AsyncSession, user_id: int, answer_id: int) -> bool:
        query = delete(Vote).where(Vote.user_id == user_id, Vote.answer_id == answer_id)
        result = await session.execute(query)
        return result.rowcount > 0


# Create a singleton instance
vote_repo = VoteRepository()
