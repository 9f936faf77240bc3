import logging

from aiogram import Dispatcher, F, types
from aiogram.filters import Command
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot.screens import admin_panel_screen, admin_pending_screen, admin_stats_screen
from askbot.bot.utils.ui import parse_id, respond, respond_message
from askbot.core.formatting import preview
from askbot.core.lifecycle import QuestionLifecycle
from askbot.core.transport import Action, Reply

logger = logging.getLogger(__name__)


async def operator_only(lifecycle: QuestionLifecycle, user_id: int, screen, session: AsyncSession) -> Reply:
    """Build an operator screen, refusing everyone else."""
    lifecycle.ensure_operator(user_id)
    return await screen(session)


async def cmd_admin(message: types.Message, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    """Handler for the /admin command. Shows the panel to the operator only."""
    user_id = message.from_user.id
    logger.info(f"Admin command called by user {user_id}")
    await respond_message(message, operator_only(lifecycle, user_id, admin_panel_screen, session))


async def on_admin_panel(callback: types.CallbackQuery, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    await respond(callback, operator_only(lifecycle, callback.from_user.id, admin_panel_screen, session))


async def on_admin_pending(callback: types.CallbackQuery, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    await respond(callback, operator_only(lifecycle, callback.from_user.id, admin_pending_screen, session))


async def on_admin_stats(callback: types.CallbackQuery, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    await respond(callback, operator_only(lifecycle, callback.from_user.id, admin_stats_screen, session))


async def on_approve(callback: types.CallbackQuery, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    question_id = parse_id(callback.data, "APPROVE_")
    logger.info(f"User {callback.from_user.id} approving question {question_id}")

    async def approve() -> Reply:
        question = await lifecycle.publish(session, callback.from_user.id, question_id)
        return Reply(
            f"✅ <b>Question Approved!</b>\n\n{preview(question.text, 200)}\n\nPosted to channel.",
            [[Action("📋 Pending Questions", token="ADMIN_PENDING")]],
            toast="Approved",
        )

    await respond(callback, approve())


async def on_reject(callback: types.CallbackQuery, session: AsyncSession, lifecycle: QuestionLifecycle) -> None:
    question_id = parse_id(callback.data, "REJECT_")
    logger.info(f"User {callback.from_user.id} rejecting question {question_id}")

    async def reject() -> Reply:
        await lifecycle.reject(session, callback.from_user.id, question_id)
        return Reply(
            f"❌ <b>Question {question_id} Rejected</b>\n\nThe author has been notified.",
            [[Action("📋 Pending Questions", token="ADMIN_PENDING")]],
            toast="Rejected",
        )

    await respond(callback, reject())


def register_handlers(dp: Dispatcher) -> None:
    """Register operator handlers."""
    dp.message.register(cmd_admin, Command("admin"))

    dp.callback_query.register(on_admin_panel, F.data == "ADMIN_PANEL")
    dp.callback_query.register(on_admin_pending, F.data == "ADMIN_PENDING")
    dp.callback_query.register(on_admin_stats, F.data == "ADMIN_STATS")
    dp.callback_query.register(on_approve, F.data.regexp(r"^APPROVE_\d+$"))
    dp.callback_query.register(on_reject, F.data.regexp(r"^REJECT_\d+$"))
