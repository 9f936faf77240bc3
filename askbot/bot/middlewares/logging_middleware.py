from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import Update
from loguru import logger

from askbot.core.sessions import SessionStore


class StateLoggingMiddleware(BaseMiddleware):
    async def __call__(
        self,
        handler: Callable[[Update, Dict[str, Any]], Awaitable[Any]],
        event: Update,
        data: Dict[str, Any]
    ) -> Any:
        logger.info(f"Processing update ID: {event.update_id}")

        current_step = "idle"
        sessions: SessionStore | None = data.get("sessions")
        user = data.get("event_from_user")
        if sessions is not None and user is not None and "session" in data:
            state = await sessions.get(data["session"], user.id)
            if state is not None:
                current_step = state.step

        if event.callback_query:
            logger.info(
                f"CALLBACK: User {event.callback_query.from_user.id} | "
                f"Data '{event.callback_query.data}' | Step '{current_step}'"
            )
        elif event.message and event.message.from_user:
            message_text = event.message.text or "[No text]"
            shortened_text = message_text[:30] + ("..." if len(message_text) > 30 else "")
            logger.info(f"MESSAGE: User {event.message.from_user.id} | Text '{shortened_text}' | Step '{current_step}'")

        try:
            return await handler(event, data)
        except Exception as e:
            logger.error(f"Error processing update {event.update_id}: {e}")
            if event.callback_query:
                logger.error(f"Error occurred with callback data: {event.callback_query.data}")
            raise
