from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.models import Notification, NotificationType
from askbot.db.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for working with Notification models."""

    def __init__(self):
        super().__init__(Notification)

    async def create_notification(
        self,
        session: AsyncSession,
        user_id: int,
        kind: NotificationType,
        payload: Dict[str, Any],
    ) -> Notification:
        notification = Notification(user_id=user_id, type=kind.value, payload=payload, is_read=False)
        session.add(notification)
        await session.flush()
        return notification

    async def get_recent(self, session: AsyncSession, user_id: int, limit: int = 10) -> list[Notification]:
        query = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_for_user(self, session: AsyncSession, user_id: int, kind: NotificationType | None = None) -> list[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if kind is not None:
            query = query.where(Notification.type == kind.value)
        result = await session.execute(query.order_by(Notification.id))
        return list(result.scalars().all())

    async def count_unread(self, session: AsyncSession, user_id: int) -> int:
        return await self.count(session, Notification.user_id == user_id, Notification.is_read.is_(False))

    async def mark_read(self, session: AsyncSession, user_id: int, notification_id: int) -> bool:
        """Mark one notification read. False if it does not belong to the user."""
        query = (
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(is_read=True)
        )
        result = await session.execute(query)
        return result.rowcount > 0

    async def mark_all_read(self, session: AsyncSession, user_id: int) -> int:
        query = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        result = await session.execute(query)
        return result.rowcount


# Create a singleton instance
notification_repo = NotificationRepository()
