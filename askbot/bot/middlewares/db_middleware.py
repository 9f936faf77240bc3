from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from askbot.core.errors import StoreUnavailable


class DbSessionMiddleware(BaseMiddleware):
    """Middleware to inject SQLAlchemy AsyncSession into handlers."""

    def __init__(self, session_pool: async_sessionmaker[AsyncSession]):
        super().__init__()
        self.session_pool = session_pool
        logger.info("DbSessionMiddleware initialized.")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        async with self.session_pool() as session:
            data["session"] = session
            try:
                return await handler(event, data)
            except SQLAlchemyError as e:
                logger.exception(f"Database error while handling update: {e}")
                await session.rollback()
                logger.warning("Session rolled back due to database error.")
                raise StoreUnavailable(str(e)) from e
