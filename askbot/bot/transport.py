from typing import Sequence

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from loguru import logger

from askbot.bot.keyboards.inline import to_markup
from askbot.core.transport import Action, ChatId, DeliveryFailed


class AiogramTransport:
    """Sends messages through the Telegram Bot API."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(self, chat_id: ChatId, text: str, keyboard: Sequence[Sequence[Action]] = ()) -> int:
        try:
            message = await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=to_markup(keyboard))
        except TelegramAPIError as e:
            raise DeliveryFailed(f"send to {chat_id} failed: {e}") from e
        return message.message_id

    async def edit_keyboard(self, chat_id: ChatId, message_id: int, keyboard: Sequence[Sequence[Action]]) -> None:
        try:
            await self.bot.edit_message_reply_markup(
                chat_id=chat_id, message_id=message_id, reply_markup=to_markup(keyboard)
            )
        except TelegramBadRequest as e:
            if "message is not modified" in str(e):
                logger.debug(f"Keyboard of message {message_id} in {chat_id} already up to date")
                return
            raise DeliveryFailed(f"edit of {message_id} in {chat_id} failed: {e}") from e
        except TelegramAPIError as e:
            raise DeliveryFailed(f"edit of {message_id} in {chat_id} failed: {e}") from e
