"""
Bot runtime: wiring of services, middlewares and handlers, and the polling and
webhook runners.
"""

import asyncio
import logging
from typing import Any, Dict

from aiohttp import web
from aiogram import Bot, Dispatcher, types
from aiogram.client.default import DefaultBotProperties
from aiogram.types import BotCommand
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from askbot.bot.conversation import ConversationController
from askbot.bot.handlers import register_handlers
from askbot.bot.middlewares import (
    DbSessionMiddleware,
    StateLoggingMiddleware,
    UserLockMiddleware,
    UserRegistrationMiddleware,
)
from askbot.bot.transport import AiogramTransport
from askbot.core.answers import AnswerBoard
from askbot.core.config import Settings, get_settings
from askbot.core.lifecycle import QuestionLifecycle
from askbot.core.moderation import ContentModerator
from askbot.core.notifications import NotificationDispatcher
from askbot.core.sessions import SessionStore
from askbot.core.subscriptions import SubscriptionRegistry
from askbot.core.transport import Transport
from askbot.core.voting import VotingEngine
from askbot.db import get_async_engine, get_session_factory, init_models

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand(command="start", description="Start the bot"),
    BotCommand(command="ask", description="Ask a new question"),
    BotCommand(command="myprofile", description="View your profile"),
    BotCommand(command="settings", description="Bot settings"),
    BotCommand(command="help", description="Get help"),
    BotCommand(command="admin", description="Admin panel"),
]


def build_services(transport: Transport, settings: Settings, bot_username: str) -> Dict[str, Any]:
    """Create the domain services. Keys become handler arguments."""
    moderator = ContentModerator(settings.BANNED_WORDS, settings.MAX_TEXT_LENGTH)
    sessions = SessionStore(settings.SESSION_TTL_MINUTES)
    notifier = NotificationDispatcher(transport, settings.PUBLIC_CHANNEL)
    lifecycle = QuestionLifecycle(
        transport,
        moderator,
        notifier,
        admin_id=settings.ADMIN_ID,
        channel=settings.PUBLIC_CHANNEL,
        bot_username=bot_username,
    )
    board = AnswerBoard(moderator, notifier, lifecycle)
    controller = ConversationController(sessions, moderator, lifecycle, board, transport, admin_id=settings.ADMIN_ID)
    return {
        "settings": settings,
        "sessions": sessions,
        "notifier": notifier,
        "lifecycle": lifecycle,
        "board": board,
        "voting": VotingEngine(notifier),
        "registry": SubscriptionRegistry(),
        "controller": controller,
    }


def register_middlewares(dp: Dispatcher, session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Register middlewares for the dispatcher. Order matters."""
    logger.info("Registering middlewares")
    dp.update.middleware(UserLockMiddleware())
    dp.update.middleware(DbSessionMiddleware(session_factory))
    dp.update.middleware(UserRegistrationMiddleware())
    dp.update.middleware(StateLoggingMiddleware())
    logger.info("Middlewares registered")


async def create_dispatcher(bot: Bot, session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> Dispatcher:
    me = await bot.get_me()
    bot_username = settings.BOT_USERNAME or me.username or ""
    logger.info(f"Running as @{bot_username}")

    dp = Dispatcher()
    dp.workflow_data.update(build_services(AiogramTransport(bot), settings, bot_username))
    register_middlewares(dp, session_factory)
    register_handlers(dp)
    return dp


async def on_shutdown(bot: Bot, engine: AsyncEngine) -> None:
    logger.info("Shutting down the bot")
    await bot.session.close()
    await engine.dispose()
    logger.info("Bot shutdown complete")


async def run_polling_bot(bot: Bot, dp: Dispatcher) -> None:
    """Run the bot in polling mode."""
    logger.info("Starting bot in polling mode")
    await bot.delete_webhook(drop_pending_updates=True)
    logger.info("Bot started polling for updates. Press Ctrl+C to stop")
    await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())


async def run_webhook_bot(bot: Bot, dp: Dispatcher, settings: Settings) -> None:
    """Run the bot in webhook mode behind an aiohttp server."""
    webhook_url = f"{settings.WEBHOOK_HOST.rstrip('/')}{settings.WEBHOOK_PATH}"
    logger.info(f"Starting bot in webhook mode at {webhook_url}, listening on port {settings.BOT_PORT}")

    async def health_handler(request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "service": "askbot"})

    async def webhook_handler(request: web.Request) -> web.Response:
        update = types.Update.model_validate(await request.json(), context={"bot": bot})
        await dp.feed_update(bot, update)
        return web.json_response({"ok": True})

    app = web.Application()
    app.router.add_get("/health", health_handler)
    app.router.add_post(settings.WEBHOOK_PATH, webhook_handler)

    await bot.set_webhook(url=webhook_url, allowed_updates=dp.resolve_used_update_types())
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", settings.BOT_PORT)
    await site.start()
    logger.info("Webhook listener started")

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down webhook listener")
        await runner.cleanup()


async def start_bot() -> None:
    """Entry point for starting the bot, called from askbot.main."""
    settings = get_settings()

    engine = get_async_engine(settings.DB_URL, echo=settings.DEBUG)
    await init_models(engine)
    session_factory = get_session_factory(engine)

    bot = Bot(token=settings.BOT_TOKEN, default=DefaultBotProperties(parse_mode="HTML"))
    try:
        dp = await create_dispatcher(bot, session_factory, settings)
        await bot.set_my_commands(BOT_COMMANDS)
        if not settings.ADMIN_ID:
            logger.warning("ADMIN_ID is not set: questions cannot be approved")
        if not settings.PUBLIC_CHANNEL:
            logger.warning("PUBLIC_CHANNEL is not set: approved questions cannot be published")

        if settings.WEBHOOK_HOST:
            await run_webhook_bot(bot, dp, settings)
        else:
            await run_polling_bot(bot, dp)
    finally:
        await on_shutdown(bot, engine)
