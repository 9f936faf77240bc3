import logging

from aiogram import Dispatcher, F, types
from aiogram.filters import Command
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot.screens import (
    leaderboard_screen,
    manage_subscriptions_screen,
    notifications_screen,
    profile_screen,
    stats_screen,
    subscriptions_screen,
)
from askbot.bot.utils.ui import parse_id, respond, respond_message, show_reply
from askbot.core.notifications import NotificationDispatcher
from askbot.core.subscriptions import SubscriptionRegistry

logger = logging.getLogger(__name__)


async def cmd_myprofile(message: types.Message, session: AsyncSession) -> None:
    await respond_message(message, profile_screen(session, message.from_user.id))


async def on_user_profile(callback: types.CallbackQuery, session: AsyncSession) -> None:
    await respond(callback, profile_screen(session, callback.from_user.id))


async def on_leaderboard(callback: types.CallbackQuery, session: AsyncSession) -> None:
    await respond(callback, leaderboard_screen(session))


async def on_notifications(callback: types.CallbackQuery, session: AsyncSession, notifier: NotificationDispatcher) -> None:
    await respond(callback, notifications_screen(session, notifier, callback.from_user.id))


async def on_mark_read(callback: types.CallbackQuery, session: AsyncSession, notifier: NotificationDispatcher) -> None:
    notification_id = parse_id(callback.data, "MARK_READ_")
    await notifier.mark_read(session, callback.from_user.id, notification_id)
    await respond(callback, notifications_screen(session, notifier, callback.from_user.id))


async def on_mark_all_read(callback: types.CallbackQuery, session: AsyncSession, notifier: NotificationDispatcher) -> None:
    updated = await notifier.mark_all_read(session, callback.from_user.id)
    logger.info(f"User {callback.from_user.id} marked {updated} notifications read")
    reply = await notifications_screen(session, notifier, callback.from_user.id)
    reply.toast = "All notifications marked as read!"
    await show_reply(callback, reply)


async def on_subscription_settings(callback: types.CallbackQuery, session: AsyncSession, registry: SubscriptionRegistry) -> None:
    await respond(callback, subscriptions_screen(session, registry, callback.from_user.id))


async def on_manage_subscriptions(callback: types.CallbackQuery, session: AsyncSession, registry: SubscriptionRegistry) -> None:
    await respond(callback, manage_subscriptions_screen(session, registry, callback.from_user.id))


async def on_bot_stats(callback: types.CallbackQuery, session: AsyncSession) -> None:
    await respond(callback, stats_screen(session))


def register_handlers(dp: Dispatcher) -> None:
    """Register profile, notification and subscription screens."""
    dp.message.register(cmd_myprofile, Command("myprofile"))

    dp.callback_query.register(on_user_profile, F.data == "USER_PROFILE")
    dp.callback_query.register(on_leaderboard, F.data == "LEADERBOARD")
    dp.callback_query.register(on_notifications, F.data == "NOTIFICATIONS_MENU")
    dp.callback_query.register(on_mark_read, F.data.regexp(r"^MARK_READ_\d+$"))
    dp.callback_query.register(on_mark_all_read, F.data == "MARK_ALL_READ")
    dp.callback_query.register(on_subscription_settings, F.data == "SUBSCRIPTION_SETTINGS")
    dp.callback_query.register(on_manage_subscriptions, F.data == "MANAGE_SUBSCRIPTIONS")
    dp.callback_query.register(on_bot_stats, F.data == "BOT_STATS")
