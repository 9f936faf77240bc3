from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import Answer
from askbot.db.repositories.base import BaseRepository


class AnswerRepository(BaseRepository[Answer]):
    """Repository for working with Answer models."""

    def __init__(self):
        super().__init__(Answer)

    async def create_answer(self, session: AsyncSession, question_id: int, author_id: int, text: str) -> Answer:
        """Create a new answer."""
        answer = Answer(question_id=question_id, author_id=author_id, text=text, votes=0)
        session.add(answer)
        await session.flush()
        return answer

    async def get_for_question(self, session: AsyncSession, question_id: int, limit: int = 50) -> list[Answer]:
        """Answers of a question, best voted first, then newest."""
        query = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(Answer.votes.desc(), Answer.created_at.desc(), Answer.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def count_for_question(self, session: AsyncSession, question_id: int) -> int:
        return await self.count(session, Answer.question_id == question_id)

    async def apply_vote_delta(self, session: AsyncSession, answer_id: int, delta: int) -> None:
        """Add a signed delta to the aggregate vote count."""
        query = update(Answer).where(Answer.id == answer_id).values(votes=Answer.votes + delta)
        await session.execute(query)

    async def count_created_since(self, session: AsyncSession, since: datetime) -> int:
        return await self.count(session, Answer.created_at >= since)


# Create a singleton instance
answer_repo = AnswerRepository()
