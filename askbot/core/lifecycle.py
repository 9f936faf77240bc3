"""
Question lifecycle: submission, operator review and channel publication.

A question is created pending, then either approved (posted to the public channel,
author rewarded once) or rejected (deleted, author told they may resubmit).
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.errors import AlreadyApproved, Forbidden, ModerationRejected, NotFound, QAError
from askbot.core.formatting import preview, quote
from askbot.core.moderation import ContentModerator
from askbot.core.notifications import NotificationDispatcher, QuestionApprovedPayload
from askbot.core.ranking import Award, award_points
from askbot.core.transport import Action, DeliveryFailed, Keyboard, Transport
from askbot.db.models import Question
from askbot.db.repositories import question_repo


class QuestionLifecycle:
    def __init__(
        self,
        transport: Transport,
        moderator: ContentModerator,
        dispatcher: NotificationDispatcher,
        admin_id: int,
        channel: str = "",
        bot_username: str = "",
    ):
        self.transport = transport
        self.moderator = moderator
        self.dispatcher = dispatcher
        self.admin_id = admin_id
        self.channel = channel
        self.bot_username = bot_username

    def is_operator(self, user_id: int) -> bool:
        return bool(self.admin_id) and user_id == self.admin_id

    def ensure_operator(self, user_id: int) -> None:
        if not self.is_operator(user_id):
            logger.warning(f"User {user_id} attempted an operator action")
            raise Forbidden(f"user {user_id} is not the operator")

    def channel_keyboard(self, question_id: int, answer_count: int) -> Keyboard:
        """Buttons under a question's channel post."""
        keyboard = [[
            Action("💬 Answer", token=f"CHANNEL_ANSWER_{question_id}"),
            Action(f"🔍 Browse ({answer_count})", token=f"CHANNEL_BROWSE_{question_id}"),
        ]]
        if self.bot_username:
            keyboard.append([
                Action("📱 Open in Bot", url=f"https://t.me/{self.bot_username}?start=channel_{question_id}"),
            ])
        return keyboard

    @staticmethod
    def channel_text(question: Question) -> str:
        return f"📌 <b>{quote(question.topic)}</b>\n\n{quote(question.text)}\n\n<i>By: Anonymous</i>"

    async def submit(self, session: AsyncSession, author_id: int, text: str, topic: str) -> Question:
        """Create a pending question and ask the operator to review it."""
        verdict = self.moderator.evaluate(text)
        if not verdict.allowed:
            raise ModerationRejected(verdict.reason)

        question = await question_repo.create_question(session, author_id, text, topic)
        await session.commit()
        logger.info(f"Question {question.id} submitted by user {author_id} under '{topic}'")

        if not self.admin_id:
            logger.warning(f"ADMIN_ID is not set, question {question.id} cannot be reviewed")
            return question

        review_text = (
            "🆕 <b>New Question for Review</b>\n\n"
            f"<b>Topic:</b> {quote(topic)}\n"
            f"<b>Question:</b> {quote(text)}\n\n"
            f"<b>ID:</b> {question.id}"
        )
        keyboard = [[
            Action("✅ Approve", token=f"APPROVE_{question.id}"),
            Action("❌ Reject", token=f"REJECT_{question.id}"),
        ]]
        try:
            await self.transport.send_message(self.admin_id, review_text, keyboard)
        except DeliveryFailed as e:
            logger.error(f"Could not send question {question.id} to the operator: {e}")
        return question

    async def approve(self, session: AsyncSession, actor_id: int, question_id: int, published_ref: int) -> Question:
        """Mark a pending question approved and reward its author exactly once."""
        self.ensure_operator(actor_id)

        question = await question_repo.get_for_update(session, question_id)
        if question is None:
            raise NotFound(f"question {question_id} does not exist")
        if question.approved:
            raise AlreadyApproved(f"question {question_id} is already approved")

        if not await question_repo.mark_approved(session, question_id, published_ref):
            # Lost a race with another approval or a rejection
            await session.rollback()
            if await question_repo.get(session, question_id) is None:
                raise NotFound(f"question {question_id} was removed")
            raise AlreadyApproved(f"question {question_id} is already approved")

        await award_points(session, question.author_id, Award.QUESTION_APPROVED)
        await session.commit()
        question = await question_repo.get_for_update(session, question_id)
        logger.info(f"Question {question_id} approved by {actor_id}, published as {published_ref}")

        await self.dispatcher.notify(
            session,
            question.author_id,
            QuestionApprovedPayload(question_id=question.id, question_text=question.text, published_ref=published_ref),
        )
        return question

    async def publish(self, session: AsyncSession, actor_id: int, question_id: int) -> Question:
        """Post a pending question to the public channel, then approve it."""
        self.ensure_operator(actor_id)

        question = await question_repo.get_for_update(session, question_id)
        if question is None:
            raise NotFound(f"question {question_id} does not exist")
        if question.approved:
            raise AlreadyApproved(f"question {question_id} is already approved")
        if not self.channel:
            raise QAError("PUBLIC_CHANNEL is not set", user_message="⚠️ Publication channel is not configured.")

        try:
            published_ref = await self.transport.send_message(
                self.channel,
                self.channel_text(question),
                self.channel_keyboard(question.id, question.answer_count),
            )
        except DeliveryFailed as e:
            logger.error(f"Could not post question {question_id} to {self.channel}: {e}")
            raise QAError(str(e), user_message="⚠️ Could not post to the channel. Please try again.") from e

        return await self.approve(session, actor_id, question_id, published_ref)

    async def reject(self, session: AsyncSession, actor_id: int, question_id: int) -> None:
        """Delete a pending question and tell the author."""
        self.ensure_operator(actor_id)

        question = await question_repo.get_for_update(session, question_id)
        if question is None or question.approved:
            raise NotFound(f"question {question_id} is not pending")

        author_id, text = question.author_id, question.text
        if not await question_repo.delete_pending(session, question_id):
            raise NotFound(f"question {question_id} is not pending")
        await session.commit()
        logger.info(f"Question {question_id} rejected by {actor_id}")

        message = (
            "❌ <b>Question Not Approved</b>\n\n"
            f"<b>Your question:</b> {preview(text, 200)}\n\n"
            "It didn't meet our community guidelines. Feel free to rephrase it and try again."
        )
        try:
            await self.transport.send_message(author_id, message, [[Action("❓ Ask Again", token="START_QUESTION")]])
        except DeliveryFailed as e:
            logger.warning(f"Could not tell user {author_id} about rejected question {question_id}: {e}")

    async def refresh_channel_counter(self, question: Question, answer_count: int | None = None) -> None:
        """Update the Browse (n) button on the channel post. Best effort."""
        if not self.channel or not question.published_ref:
            return
        count = question.answer_count if answer_count is None else answer_count
        try:
            await self.transport.edit_keyboard(
                self.channel, question.published_ref, self.channel_keyboard(question.id, count)
            )
        except DeliveryFailed as e:
            logger.debug(f"Channel counter for question {question.id} not refreshed: {e}")
