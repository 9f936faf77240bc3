import logging

from aiogram import Dispatcher, F, types
from aiogram.filters import Command, CommandObject, CommandStart
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot import texts
from askbot.bot.conversation import ConversationController
from askbot.bot.keyboards.inline import get_back_to_help_keyboard, get_help_keyboard, get_settings_keyboard
from askbot.bot.utils.ui import answer_message, respond, respond_message, show_reply
from askbot.core.transport import Reply

logger = logging.getLogger(__name__)

HELP_PAGES = {
    "HOW_TO_ASK": texts.HOW_TO_ASK,
    "HOW_TO_COMMENT": texts.HOW_TO_ANSWER,
    "SAFETY_GUIDE": texts.SAFETY_GUIDE,
}


async def cmd_start(
    message: types.Message,
    command: CommandObject,
    session: AsyncSession,
    controller: ConversationController,
) -> None:
    """Handle /start, including channel_<id> and answer_<id> deep links."""
    user = message.from_user
    logger.info(f"User {user.id} started the bot (payload={command.args!r})")
    await respond_message(message, controller.start(session, user.id, user.first_name or "User", command.args))


async def on_back_to_main(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    user = callback.from_user
    await respond(callback, controller.main_menu(session, user.id, user.first_name or "User"))


async def cmd_help(message: types.Message) -> None:
    await answer_message(message, Reply(texts.HELP, get_help_keyboard()))


async def on_help_menu(callback: types.CallbackQuery) -> None:
    await show_reply(callback, Reply(texts.HELP, get_help_keyboard()))


async def on_help_page(callback: types.CallbackQuery) -> None:
    await show_reply(callback, Reply(HELP_PAGES[callback.data], get_back_to_help_keyboard()))


async def on_contact_support(callback: types.CallbackQuery) -> None:
    await show_reply(callback, Reply(texts.CONTACT_SUPPORT, get_back_to_help_keyboard(with_feedback=True)))


async def cmd_settings(message: types.Message) -> None:
    await answer_message(message, Reply(texts.SETTINGS, get_settings_keyboard()))


async def on_more_options(callback: types.CallbackQuery) -> None:
    await show_reply(callback, Reply(texts.SETTINGS, get_settings_keyboard()))


def register_handlers(dp: Dispatcher) -> None:
    """Register start, menu and help handlers."""
    dp.message.register(cmd_start, CommandStart())
    dp.message.register(cmd_help, Command("help"))
    dp.message.register(cmd_settings, Command("settings"))

    dp.callback_query.register(on_back_to_main, F.data == "BACK_TO_MAIN")
    dp.callback_query.register(on_help_menu, F.data == "HELP_MENU")
    dp.callback_query.register(on_help_page, F.data.in_(HELP_PAGES))
    dp.callback_query.register(on_contact_support, F.data == "CONTACT_SUPPORT")
    dp.callback_query.register(on_more_options, F.data == "MORE_OPTIONS")
