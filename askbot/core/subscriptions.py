from typing import List, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.errors import NotFound
from askbot.db.models import Question, Subscription
from askbot.db.repositories import question_repo, subscription_repo


class SubscriptionRegistry:
    """Who wants to hear about new answers on which question."""

    async def subscribe(self, session: AsyncSession, user_id: int, question_id: int) -> bool:
        """Subscribe to an approved question. Returns False if already subscribed."""
        question = await question_repo.get(session, question_id)
        if question is None or not question.approved:
            raise NotFound(f"question {question_id} is not live")

        if await subscription_repo.is_subscribed(session, user_id, question_id):
            return False

        await subscription_repo.add(session, user_id, question_id)
        await session.commit()
        logger.info(f"User {user_id} subscribed to question {question_id}")
        return True

    async def unsubscribe(self, session: AsyncSession, user_id: int, question_id: int) -> bool:
        """Returns False if there was nothing to remove."""
        removed = await subscription_repo.remove(session, user_id, question_id)
        await session.commit()
        if removed:
            logger.info(f"User {user_id} unsubscribed from question {question_id}")
        return removed

    async def is_subscribed(self, session: AsyncSession, user_id: int, question_id: int) -> bool:
        return await subscription_repo.is_subscribed(session, user_id, question_id)

    async def list_for_user(self, session: AsyncSession, user_id: int) -> List[Tuple[Subscription, Question]]:
        return await subscription_repo.get_user_subscriptions(session, user_id)
