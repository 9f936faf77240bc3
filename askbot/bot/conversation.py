"""
Conversation controller.

Drives the per-user single-slot state machine for asking, editing, answering and
sending feedback. Every method reads the current session, applies one transition
and returns the reply to show. Handlers stay thin and only render the reply.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.bot import texts
from askbot.bot.keyboards.inline import (
    get_ask_menu_keyboard,
    get_cancel_keyboard,
    get_custom_topic_keyboard,
    get_edit_keyboard,
    get_home_keyboard,
    get_main_menu_keyboard,
    get_preview_keyboard,
    get_question_card_keyboard,
    get_retry_keyboard,
    get_topics_keyboard,
)
from askbot.core.answers import AnswerBoard
from askbot.core.errors import ModerationRejected, NotFound
from askbot.core.formatting import quote
from askbot.core.lifecycle import QuestionLifecycle
from askbot.core.moderation import ContentModerator
from askbot.core.sessions import (
    AwaitingAnswer,
    AwaitingFeedback,
    AwaitingQuestion,
    AwaitingTopic,
    ConfirmQuestion,
    EditingQuestion,
    SessionStore,
)
from askbot.core.topics import CUSTOM_TOPIC_INDEX, topic_by_index
from askbot.core.transport import Action, DeliveryFailed, Reply, Transport

MAX_TOPIC_LENGTH = 100


def preview_reply(question: str, topic: str, title: str = "📋 <b>Question Preview</b>") -> Reply:
    return Reply(
        f"{title}\n\n"
        f"<b>Topic:</b> {quote(topic)}\n"
        f"<b>Your Question:</b> {quote(question)}\n\n"
        "<b>Ready to submit for approval?</b>",
        get_preview_keyboard(),
    )


def blocked_reply(what: str, reason: str, retry_token: str) -> Reply:
    return Reply(
        f"❌ <b>{what} Blocked</b>\n\n{quote(reason)}\n\nPlease modify it and try again.",
        get_retry_keyboard(retry_token),
    )


class ConversationController:
    def __init__(
        self,
        sessions: SessionStore,
        moderator: ContentModerator,
        lifecycle: QuestionLifecycle,
        board: AnswerBoard,
        transport: Transport,
        admin_id: int = 0,
    ):
        self.sessions = sessions
        self.moderator = moderator
        self.lifecycle = lifecycle
        self.board = board
        self.transport = transport
        self.admin_id = admin_id

    # --- Entry points ---

    async def start(self, session: AsyncSession, user_id: int, first_name: str, payload: str | None = None) -> Reply:
        """/start, optionally with a channel_<id> or answer_<id> deep link."""
        if payload:
            prefix, _, raw_id = payload.partition("_")
            if raw_id.isdigit():
                if prefix == "channel":
                    return await self.question_card(session, int(raw_id))
                if prefix == "answer":
                    return await self.begin_answer(session, user_id, int(raw_id))
            logger.info(f"User {user_id} opened unknown deep link '{payload}'")

        await self.sessions.clear(session, user_id)
        return Reply(texts.welcome_text(first_name), get_main_menu_keyboard())

    async def main_menu(self, session: AsyncSession, user_id: int, first_name: str) -> Reply:
        """Cancel whatever flow is open and go back to the main menu."""
        await self.sessions.clear(session, user_id)
        return Reply(texts.welcome_text(first_name, returning=True), get_main_menu_keyboard())

    @staticmethod
    def ask_menu() -> Reply:
        return Reply(texts.ASK_MENU, get_ask_menu_keyboard())

    async def question_card(self, session: AsyncSession, question_id: int) -> Reply:
        question = await self.board.get_live_question(session, question_id)
        return Reply(
            "📋 <b>Question from Channel</b>\n\n"
            f"<b>Topic:</b> {quote(question.topic)}\n"
            f"<b>Question:</b> {quote(question.text)}\n\n"
            "What would you like to do?",
            get_question_card_keyboard(question.id),
        )

    # --- Question authoring ---

    async def begin_question(self, session: AsyncSession, user_id: int) -> Reply:
        await self.sessions.save(session, user_id, AwaitingQuestion())
        return Reply(texts.QUESTION_PROMPT, get_cancel_keyboard())

    async def select_topic(self, session: AsyncSession, user_id: int, index: int) -> Reply:
        state = await self.sessions.get(session, user_id)
        if not isinstance(state, AwaitingTopic):
            raise NotFound(f"user {user_id} picked a topic outside the topic step")

        if index == CUSTOM_TOPIC_INDEX:
            await self.sessions.save(session, user_id, AwaitingTopic(question=state.question, custom_topic=True))
            return Reply(texts.CUSTOM_TOPIC_PROMPT, get_custom_topic_keyboard())

        topic = topic_by_index(index)
        if topic is None:
            raise NotFound(f"unknown topic index {index}")

        await self.sessions.save(session, user_id, ConfirmQuestion(question=state.question, topic=topic))
        return preview_reply(state.question, topic)

    async def show_topics(self, session: AsyncSession, user_id: int) -> Reply:
        """Leave the custom topic sub-mode and show the topic list again."""
        state = await self.sessions.get(session, user_id)
        if not isinstance(state, AwaitingTopic):
            raise NotFound(f"user {user_id} asked for topics outside the topic step")

        if state.custom_topic:
            await self.sessions.save(session, user_id, AwaitingTopic(question=state.question))
        return Reply(texts.CHOOSE_TOPIC, get_topics_keyboard())

    async def edit_question(self, session: AsyncSession, user_id: int) -> Reply:
        state = await self.sessions.get(session, user_id)
        if not isinstance(state, (ConfirmQuestion, EditingQuestion)):
            raise NotFound(f"user {user_id} has no question to edit")

        await self.sessions.save(session, user_id, EditingQuestion(question=state.question, topic=state.topic))
        return Reply(
            "✏️ <b>Edit Your Question</b>\n\n"
            f"<b>Current Question:</b>\n\"{quote(state.question)}\"\n\n"
            "<b>Please send your updated question:</b>",
            get_edit_keyboard(),
        )

    async def cancel_edit(self, session: AsyncSession, user_id: int) -> Reply:
        state = await self.sessions.get(session, user_id)
        if not isinstance(state, (ConfirmQuestion, EditingQuestion)):
            raise NotFound(f"user {user_id} has no edit to cancel")

        await self.sessions.save(session, user_id, ConfirmQuestion(question=state.question, topic=state.topic))
        return preview_reply(state.question, state.topic)

    async def submit_question(self, session: AsyncSession, user_id: int) -> Reply:
        state = await self.sessions.get(session, user_id)
        if not isinstance(state, ConfirmQuestion):
            raise NotFound(f"user {user_id} has no question ready to submit")

        try:
            await self.lifecycle.submit(session, user_id, state.question, state.topic)
        except ModerationRejected as e:
            return Reply(
                f"❌ <b>Question Blocked</b>\n\n{quote(e.reason)}\n\nPlease modify your question and try again.",
                [[Action("✏️ Edit Question", token="EDIT_QUESTION")], [Action("🚫 Cancel", token="BACK_TO_MAIN")]],
            )

        await self.sessions.clear(session, user_id)
        return Reply(
            "✅ <b>Question Submitted!</b>\n\n"
            f"<b>Topic:</b> {quote(state.topic)}\n"
            f"<b>Question:</b> {quote(state.question)}\n\n"
            "⏳ <i>Waiting for admin approval...</i>",
            get_home_keyboard(),
        )

    # --- Answering and feedback ---

    async def begin_answer(self, session: AsyncSession, user_id: int, question_id: int) -> Reply:
        question = await self.board.get_live_question(session, question_id)
        await self.sessions.save(
            session,
            user_id,
            AwaitingAnswer(question_id=question.id, question_text=question.text, published_ref=question.published_ref),
        )
        return Reply(
            "💬 <b>Answer Question</b>\n\n"
            f"<b>Question:</b> {quote(question.text)}\n\n"
            "Please type your answer below:\n\n"
            "<i>Your answer will be visible to others</i>",
            get_cancel_keyboard(),
        )

    async def begin_feedback(self, session: AsyncSession, user_id: int) -> Reply:
        await self.sessions.save(session, user_id, AwaitingFeedback())
        return Reply(texts.FEEDBACK_PROMPT, get_cancel_keyboard())

    # --- Free text ---

    async def handle_text(self, session: AsyncSession, user_id: int, username: str, text: str) -> Reply:
        """Route free text according to the user's current step."""
        state = await self.sessions.get(session, user_id)
        if state is None:
            return Reply(texts.NO_SESSION, get_main_menu_keyboard())

        if isinstance(state, AwaitingQuestion):
            verdict = self.moderator.evaluate(text)
            if not verdict.allowed:
                return blocked_reply("Question", verdict.reason, "START_QUESTION")
            await self.sessions.save(session, user_id, AwaitingTopic(question=text))
            return Reply(texts.CHOOSE_TOPIC, get_topics_keyboard())

        if isinstance(state, AwaitingTopic):
            if not state.custom_topic:
                return Reply(texts.CHOOSE_TOPIC, get_topics_keyboard())
            topic = text.strip()
            verdict = self.moderator.evaluate(topic)
            if not verdict.allowed:
                return blocked_reply("Topic", verdict.reason, "SHOW_TOPICS")
            if not topic or len(topic) > MAX_TOPIC_LENGTH:
                return blocked_reply("Topic", f"Topic must be 1-{MAX_TOPIC_LENGTH} characters", "SHOW_TOPICS")
            await self.sessions.save(session, user_id, ConfirmQuestion(question=state.question, topic=topic))
            return preview_reply(state.question, topic)

        if isinstance(state, EditingQuestion):
            verdict = self.moderator.evaluate(text)
            if not verdict.allowed:
                return blocked_reply("Question", verdict.reason, "EDIT_QUESTION")
            await self.sessions.save(session, user_id, ConfirmQuestion(question=text, topic=state.topic))
            return preview_reply(text, state.topic, title="✅ <b>Question Updated</b>")

        if isinstance(state, ConfirmQuestion):
            return preview_reply(state.question, state.topic)

        if isinstance(state, AwaitingAnswer):
            return await self._post_answer(session, user_id, state, text)

        if isinstance(state, AwaitingFeedback):
            await self._forward_feedback(user_id, username, text)
            await self.sessions.clear(session, user_id)
            return Reply(texts.FEEDBACK_SENT, get_home_keyboard())

        raise TypeError(f"Unhandled session state: {state!r}")

    async def _post_answer(self, session: AsyncSession, user_id: int, state: AwaitingAnswer, text: str) -> Reply:
        try:
            await self.board.post_answer(session, user_id, state.question_id, text)
        except ModerationRejected as e:
            return blocked_reply("Answer", e.reason, f"CHANNEL_ANSWER_{state.question_id}")
        except NotFound:
            await self.sessions.clear(session, user_id)
            raise

        await self.sessions.clear(session, user_id)
        return Reply(
            "✅ <b>Answer Posted!</b>\n\n"
            "Your answer has been added to the question!\n\n"
            "<b>+5 points</b> added to your profile!\n\n"
            "🔔 <i>You've been subscribed to this question</i>",
            [
                [Action("🔍 Browse Answers", token=f"CHANNEL_BROWSE_{state.question_id}")],
                [Action("🏠 Main Menu", token="BACK_TO_MAIN")],
            ],
        )

    async def _forward_feedback(self, user_id: int, username: str, text: str) -> None:
        if not self.admin_id:
            logger.warning(f"Feedback from user {user_id} dropped: ADMIN_ID is not set")
            return
        try:
            await self.transport.send_message(
                self.admin_id,
                "📝 <b>New Feedback</b>\n\n"
                f"<b>From:</b> {quote(username)}\n"
                f"<b>User ID:</b> {user_id}\n"
                f"<b>Feedback:</b> {quote(text)}",
            )
        except DeliveryFailed as e:
            logger.error(f"Could not forward feedback from user {user_id}: {e}")
