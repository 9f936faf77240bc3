"""Question authoring flow, feedback and free text."""

import logging

from aiogram import Dispatcher, F, types
from aiogram.filters import Command
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot.conversation import ConversationController
from askbot.bot.middlewares.user_middleware import display_name
from askbot.bot.utils.ui import parse_id, respond, respond_message, show_reply

logger = logging.getLogger(__name__)


async def cmd_ask(message: types.Message, session: AsyncSession, controller: ConversationController) -> None:
    await respond_message(message, controller.begin_question(session, message.from_user.id))


async def on_ask_question(callback: types.CallbackQuery, controller: ConversationController) -> None:
    await show_reply(callback, controller.ask_menu())


async def on_start_question(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    await respond(callback, controller.begin_question(session, callback.from_user.id))


async def on_topic(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    index = parse_id(callback.data, "TOPIC_")
    await respond(callback, controller.select_topic(session, callback.from_user.id, index))


async def on_show_topics(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    await respond(callback, controller.show_topics(session, callback.from_user.id))


async def on_edit_question(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    await respond(callback, controller.edit_question(session, callback.from_user.id))


async def on_cancel_edit(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    await respond(callback, controller.cancel_edit(session, callback.from_user.id))


async def on_submit_question(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    logger.info(f"User {callback.from_user.id} submitting a question")
    await respond(callback, controller.submit_question(session, callback.from_user.id))


async def on_send_feedback(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    await respond(callback, controller.begin_feedback(session, callback.from_user.id))


async def on_text(message: types.Message, session: AsyncSession, controller: ConversationController) -> None:
    """Free text goes to whatever step the user is in."""
    user = message.from_user
    await respond_message(message, controller.handle_text(session, user.id, display_name(user), message.text))


def register_handlers(dp: Dispatcher) -> None:
    """Register question flow handlers."""
    dp.message.register(cmd_ask, Command("ask"))

    dp.callback_query.register(on_ask_question, F.data == "ASK_QUESTION")
    dp.callback_query.register(on_start_question, F.data == "START_QUESTION")
    dp.callback_query.register(on_topic, F.data.regexp(r"^TOPIC_\d+$"))
    dp.callback_query.register(on_show_topics, F.data == "SHOW_TOPICS")
    dp.callback_query.register(on_edit_question, F.data == "EDIT_QUESTION")
    dp.callback_query.register(on_cancel_edit, F.data == "CANCEL_EDIT")
    dp.callback_query.register(on_submit_question, F.data == "SUBMIT_QUESTION")
    dp.callback_query.register(on_send_feedback, F.data == "SEND_FEEDBACK")


def register_text_handler(dp: Dispatcher) -> None:
    """Free text catch-all; registered after every command handler."""
    dp.message.register(on_text, F.chat.type == "private", F.text, ~F.text.startswith("/"))
