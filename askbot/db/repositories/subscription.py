from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import Question, Subscription
from askbot.db.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Repository for working with Subscription models."""

    def __init__(self):
        super().__init__(Subscription)

    async def add(self, session: AsyncSession, user_id: int, question_id: int) -> Subscription:
        """Subscribe a user. Returns the existing row if already subscribed."""
        query = select(Subscription).where(
            Subscription.user_id == user_id,
            Subscription.question_id == question_id,
        )
        result = await session.execute(query)
        existing = result.scalar_one_or_none()
        if existing:
            return existing

        subscription = Subscription(user_id=user_id, question_id=question_id)
        session.add(subscription)
        await session.flush()
        return subscription

    async def remove(self, session: AsyncSession, user_id: int, question_id: int) -> bool:
        query = delete(Subscription).where(
            Subscription.user_id == user_id,
            Subscription.question_id == question_id,
        )
        result = await session.execute(query)
        return result.rowcount > 0

    async def is_subscribed(self, session: AsyncSession, user_id: int, question_id: int) -> bool:
        query = select(exists().where(
            (Subscription.user_id == user_id) &
            (Subscription.question_id == question_id)
        ))
        result = await session.execute(query)
        return result.scalar_one()

    async def get_subscriber_ids(self, session: AsyncSession, question_id: int) -> list[int]:
        """Subscribers of a question in subscription order."""
        query = (
            select(Subscription.user_id)
            .where(Subscription.question_id == question_id)
            .order_by(Subscription.id)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_user_subscriptions(self, session: AsyncSession, user_id: int) -> list[tuple[Subscription, Question]]:
        """A user's subscriptions joined with their questions."""
        query = (
            select(Subscription, Question)
            .join(Question, Question.id == Subscription.question_id)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        )
        result = await session.execute(query)
        return [(subscription, question) for subscription, question in result.all()]


# Create a singleton instance
subscription_repo = SubscriptionRepository()
