from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import Question
from askbot.db.repositories.base import BaseRepository


class QuestionRepository(BaseRepository[Question]):
    """Repository for working with Question models."""

    def __init__(self):
        super().__init__(Question)

    async def create_question(self, session: AsyncSession, author_id: int, text: str, topic: str) -> Question:
        """Create a new pending question."""
        question = Question(author_id=author_id, text=text, topic=topic, approved=False, answer_count=0)
        session.add(question)
        await session.flush()
        return question

    async def mark_approved(self, session: AsyncSession, question_id: int, published_ref: int) -> bool:
        """
        Flip a pending question to approved.

        Returns False when the question is missing or was already approved, so two
        concurrent approvals cannot both succeed.
        """
        query = (
            update(Question)
            .where(Question.id == question_id, Question.approved.is_(False))
            .values(approved=True, published_ref=published_ref)
        )
        result = await session.execute(query)
        return result.rowcount > 0

    async def delete_pending(self, session: AsyncSession, question_id: int) -> bool:
        """Delete a question only while it is still pending."""
        query = delete(Question).where(Question.id == question_id, Question.approved.is_(False))
        result = await session.execute(query)
        return result.rowcount > 0

    async def increment_answer_count(self, session: AsyncSession, question_id: int) -> None:
        query = (
            update(Question)
            .where(Question.id == question_id)
            .values(answer_count=Question.answer_count + 1)
        )
        await session.execute(query)

    async def get_approved(self, session: AsyncSession, limit: int = 10) -> list[Question]:
        """Most recent approved questions."""
        query = (
            select(Question)
            .where(Question.approved.is_(True))
            .order_by(Question.created_at.desc(), Question.id.desc())
            .limit(limit)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_pending(self, session: AsyncSession) -> list[Question]:
        """Questions waiting for the operator, newest first."""
        query = (
            select(Question)
            .where(Question.approved.is_(False))
            .order_by(Question.created_at.desc(), Question.id.desc())
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def count_created_since(self, session: AsyncSession, since: datetime) -> int:
        return await self.count(session, Question.created_at >= since)


# Create a singleton instance
question_repo = QuestionRepository()
