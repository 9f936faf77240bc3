from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.repositories import user_repo


def display_name(user: User) -> str:
    return user.username or user.first_name or "User"


class UserRegistrationMiddleware(BaseMiddleware):
    """Create the user row on first interaction and expose it as ``user``."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        tg_user: User | None = data.get("event_from_user")
        session: AsyncSession | None = data.get("session")
        if tg_user is None or session is None or tg_user.is_bot:
            return await handler(event, data)

        user, created = await user_repo.get_or_create_user(session, tg_user.id, display_name(tg_user))
        if created:
            await session.commit()
            logger.info(f"Registered new user {tg_user.id} ({user.username})")
        data["user"] = user
        return await handler(event, data)
