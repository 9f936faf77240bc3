from typing import Awaitable

from aiogram.enums import ChatType
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.types import CallbackQuery, Message
from loguru import logger

from askbot.bot.keyboards.inline import to_markup
from askbot.core.errors import NotFound, QAError
from askbot.core.transport import Reply


async def answer_message(message: Message, reply: Reply) -> None:
    """Send a reply as a new message in the same chat."""
    await message.answer(reply.text, reply_markup=to_markup(reply.keyboard))


async def show_reply(callback: CallbackQuery, reply: Reply) -> None:
    """
    Show a reply for a button press.

    Buttons under our own messages edit that message in place. Buttons under a
    channel post answer in the user's private chat instead.
    """
    message = callback.message
    from_channel = message is not None and message.chat.type == ChatType.CHANNEL

    if reply.text:
        if from_channel:
            try:
                await callback.bot.send_message(
                    callback.from_user.id, reply.text, reply_markup=to_markup(reply.keyboard)
                )
            except TelegramAPIError as e:
                logger.info(f"User {callback.from_user.id} cannot be messaged privately: {e}")
                await callback.answer("Please start the bot first, then try again.", show_alert=True)
                return
            await callback.answer(reply.toast or "Please check your messages!")
            return

        if isinstance(message, Message):
            try:
                await message.edit_text(reply.text, reply_markup=to_markup(reply.keyboard))
            except TelegramBadRequest as e:
                if "message is not modified" not in str(e):
                    logger.debug(f"Could not edit message, sending a new one: {e}")
                    await answer_message(message, reply)
        else:
            await callback.bot.send_message(callback.from_user.id, reply.text, reply_markup=to_markup(reply.keyboard))

    await callback.answer(reply.toast, show_alert=reply.alert)


async def show_toast(callback: CallbackQuery, text: str, alert: bool = False) -> None:
    await callback.answer(text, show_alert=alert)


async def respond(callback: CallbackQuery, pending: Awaitable[Reply]) -> None:
    """Await a controller call and show its reply, or its error as an alert."""
    try:
        reply = await pending
    except QAError as e:
        logger.info(f"User {callback.from_user.id} callback '{callback.data}' refused: {e}")
        await callback.answer(e.user_message, show_alert=True)
        return
    await show_reply(callback, reply)


async def respond_message(message: Message, pending: Awaitable[Reply]) -> None:
    """Await a controller call and answer the message with its reply or error."""
    try:
        reply = await pending
    except QAError as e:
        logger.info(f"User {message.from_user.id} message refused: {e}")
        await message.answer(e.user_message)
        return
    await answer_message(message, reply)


def parse_id(data: str, prefix: str) -> int:
    """Numeric suffix of a parameterized callback token."""
    raw = data.removeprefix(prefix)
    if not raw.isdigit():
        raise NotFound(f"malformed callback data '{data}'")
    return int(raw)
