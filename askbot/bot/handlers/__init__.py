"""Bot handlers initialization module."""

from aiogram import Dispatcher
from aiogram.types import ErrorEvent
from loguru import logger

from askbot.bot import texts
from askbot.bot.handlers import admin, profile, question_interactions, questions, start
from askbot.core.errors import QAError


async def on_error(event: ErrorEvent) -> bool:
    """Last-resort handler: log, then give the user a short message."""
    exception = event.exception
    if isinstance(exception, QAError):
        logger.warning(f"Update {event.update.update_id} failed: {exception!r}")
        text = exception.user_message
    else:
        logger.opt(exception=exception).error(f"Unhandled error in update {event.update.update_id}")
        text = texts.GENERIC_ERROR

    update = event.update
    if update.callback_query:
        await update.callback_query.answer(text, show_alert=True)
    elif update.message:
        await update.message.answer(text)
    return True


def register_handlers(dp: Dispatcher) -> None:
    """Register all handlers for the bot."""
    logger.info("Registering handlers from all modules...")

    start.register_handlers(dp)
    questions.register_handlers(dp)
    question_interactions.register_handlers(dp)
    profile.register_handlers(dp)
    admin.register_handlers(dp)

    # Must come after every command handler
    questions.register_text_handler(dp)

    dp.errors.register(on_error)
    logger.info("All handlers registered successfully")
