"""Channel buttons, browsing answers, votes and subscriptions."""

import logging

from aiogram import Dispatcher, F, types
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot.conversation import ConversationController
from askbot.bot.screens import answers_screen, recent_questions_screen
from askbot.bot.utils.ui import parse_id, respond, show_toast
from askbot.core.answers import AnswerBoard
from askbot.core.config import Settings
from askbot.core.errors import QAError
from askbot.core.subscriptions import SubscriptionRegistry
from askbot.core.transport import Reply
from askbot.core.voting import VotingEngine
from askbot.db.models import VoteDirection

logger = logging.getLogger(__name__)

VOTE_PREFIXES = {
    "VOTE_UP_": VoteDirection.UP,
    "VOTE_DOWN_": VoteDirection.DOWN,
    "VOTE_NONE_": None,
}


async def on_channel_answer(callback: types.CallbackQuery, session: AsyncSession, controller: ConversationController) -> None:
    question_id = parse_id(callback.data, "CHANNEL_ANSWER_")
    await respond(callback, controller.begin_answer(session, callback.from_user.id, question_id))


async def on_channel_browse(callback: types.CallbackQuery, session: AsyncSession, board: AnswerBoard) -> None:
    question_id = parse_id(callback.data, "CHANNEL_BROWSE_")

    async def build() -> Reply:
        page = await board.browse(session, callback.from_user.id, question_id)
        return answers_screen(page)

    await respond(callback, build())


async def on_browse_questions(
    callback: types.CallbackQuery, session: AsyncSession, board: AnswerBoard, settings: Settings
) -> None:
    await respond(callback, recent_questions_screen(session, board, settings.PUBLIC_CHANNEL))


async def on_vote(callback: types.CallbackQuery, session: AsyncSession, voting: VotingEngine) -> None:
    """Votes only get an ephemeral acknowledgement."""
    prefix = next(prefix for prefix in VOTE_PREFIXES if callback.data.startswith(prefix))
    answer_id = parse_id(callback.data, prefix)
    direction = VOTE_PREFIXES[prefix]

    try:
        result = await voting.cast(session, callback.from_user.id, answer_id, direction)
    except QAError as e:
        logger.info(f"Vote by {callback.from_user.id} on answer {answer_id} refused: {e}")
        await show_toast(callback, e.user_message)
        return

    if direction is VoteDirection.UP:
        await show_toast(callback, f"👍 Upvoted! Current votes: {result.votes}")
    elif direction is VoteDirection.DOWN:
        await show_toast(callback, f"👎 Downvoted! Current votes: {result.votes}")
    else:
        await show_toast(callback, f"Vote removed! Current votes: {result.votes}")


async def on_subscribe(callback: types.CallbackQuery, session: AsyncSession, registry: SubscriptionRegistry) -> None:
    question_id = parse_id(callback.data, "SUBSCRIBE_")
    try:
        created = await registry.subscribe(session, callback.from_user.id, question_id)
    except QAError as e:
        await show_toast(callback, e.user_message, alert=True)
        return
    await show_toast(callback, "🔔 Subscribed to question!" if created else "🔔 You're already subscribed")


async def on_unsubscribe(callback: types.CallbackQuery, session: AsyncSession, registry: SubscriptionRegistry) -> None:
    question_id = parse_id(callback.data, "UNSUBSCRIBE_")
    removed = await registry.unsubscribe(session, callback.from_user.id, question_id)
    await show_toast(callback, "🔕 Unsubscribed from question" if removed else "🔕 You weren't subscribed")


def register_handlers(dp: Dispatcher) -> None:
    """Register answer, vote and subscription handlers."""
    dp.callback_query.register(on_channel_answer, F.data.regexp(r"^CHANNEL_ANSWER_\d+$"))
    dp.callback_query.register(on_channel_browse, F.data.regexp(r"^CHANNEL_BROWSE_\d+$"))
    dp.callback_query.register(on_browse_questions, F.data == "BROWSE_QUESTIONS")
    dp.callback_query.register(on_vote, F.data.regexp(r"^VOTE_(UP|DOWN|NONE)_\d+$"))
    dp.callback_query.register(on_subscribe, F.data.regexp(r"^SUBSCRIBE_\d+$"))
    dp.callback_query.register(on_unsubscribe, F.data.regexp(r"^UNSUBSCRIBE_\d+$"))
