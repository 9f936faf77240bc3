import asyncio
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, User
from loguru import logger


class UserLockMiddleware(BaseMiddleware):
    """
    Handle the updates of one user strictly one at a time.

    Updates from different users still run concurrently. Locks are dropped as soon
    as no update of that user is running or waiting.
    """

    def __init__(self):
        super().__init__()
        self._locks: Dict[int, asyncio.Lock] = {}
        self._waiters: Dict[int, int] = {}

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user: User | None = data.get("event_from_user")
        if user is None:
            return await handler(event, data)

        lock = self._locks.setdefault(user.id, asyncio.Lock())
        self._waiters[user.id] = self._waiters.get(user.id, 0) + 1
        if lock.locked():
            logger.debug(f"User {user.id} update queued behind a running one")
        try:
            async with lock:
                return await handler(event, data)
        finally:
            self._waiters[user.id] -= 1
            if not self._waiters[user.id]:
                del self._waiters[user.id]
                del self._locks[user.id]

    def active_users(self) -> int:
        return len(self._locks)
