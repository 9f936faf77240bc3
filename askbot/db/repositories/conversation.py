from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.base import utcnow
from askbot.db.models import ConversationSession
from askbot.db.repositories.base import BaseRepository


class ConversationRepository(BaseRepository[ConversationSession]):
    """Repository for the single-slot conversation rows."""

    def __init__(self):
        super().__init__(ConversationSession)

    async def get_by_user(self, session: AsyncSession, user_id: int) -> ConversationSession | None:
        query = select(ConversationSession).where(ConversationSession.user_id == user_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def upsert(self, session: AsyncSession, user_id: int, state_data: str) -> ConversationSession:
        """Overwrite the user's slot, creating it if needed."""
        row = await self.get_by_user(session, user_id)
        if row:
            row.state_data = state_data
            row.updated_at = utcnow()
        else:
            row = ConversationSession(user_id=user_id, state_data=state_data)
            session.add(row)
        await session.flush()
        return row

    async def delete_by_user(self, session: AsyncSession, user_id: int) -> bool:
        query = delete(ConversationSession).where(ConversationSession.user_id == user_id)
        result = await session.execute(query)
        return result.rowcount > 0


# Create a singleton instance
conversation_repo = ConversationRepository()
