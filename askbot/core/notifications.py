"""
Notification dispatcher.

Every notification is stored first and committed on its own, then delivery is
attempted once. A failed delivery is logged and the row simply stays unread.
"""

from typing import Dict, List, Optional, Tuple, Type, Union

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.formatting import preview, quote, truncate
from askbot.core.transport import Action, DeliveryFailed, Keyboard, Transport
from askbot.db.models import Answer, Notification, NotificationType, Question, VoteDirection
from askbot.db.repositories import notification_repo, subscription_repo

RECENT_LIMIT = 10


class NewAnswerPayload(BaseModel):
    question_id: int
    question_text: str
    answer_id: int
    answer_preview: str


class QuestionApprovedPayload(BaseModel):
    question_id: int
    question_text: str
    published_ref: Optional[int] = None


class VoteReceivedPayload(BaseModel):
    question_id: int
    question_text: str
    answer_id: int
    answer_preview: str
    direction: VoteDirection


NotificationPayload = Union[NewAnswerPayload, QuestionApprovedPayload, VoteReceivedPayload]

PAYLOAD_TYPES: Dict[NotificationType, Type[BaseModel]] = {
    NotificationType.NEW_ANSWER: NewAnswerPayload,
    NotificationType.QUESTION_APPROVED: QuestionApprovedPayload,
    NotificationType.VOTE_RECEIVED: VoteReceivedPayload,
}
KIND_BY_PAYLOAD = {payload_type: kind for kind, payload_type in PAYLOAD_TYPES.items()}


def parse_payload(notification: Notification) -> NotificationPayload:
    return PAYLOAD_TYPES[notification.kind].model_validate(notification.payload)


def channel_post_url(channel: str, message_id: int) -> Optional[str]:
    """Public link to a channel post; only @username channels have one."""
    if not channel.startswith("@"):
        return None
    return f"https://t.me/{channel.lstrip('@')}/{message_id}"


class NotificationDispatcher:
    def __init__(self, transport: Transport, channel: str = ""):
        self.transport = transport
        self.channel = channel

    def render(self, payload: NotificationPayload) -> Tuple[str, Keyboard]:
        """Message text and buttons for a notification payload."""
        if isinstance(payload, NewAnswerPayload):
            text = (
                "💬 <b>New Answer!</b>\n\n"
                f"<b>Question:</b> {preview(payload.question_text, 200)}\n"
                f"<b>Answer:</b> {quote(payload.answer_preview)}"
            )
            keyboard = [
                [Action("👀 View All Answers", token=f"CHANNEL_BROWSE_{payload.question_id}")],
                [Action("🔕 Unsubscribe", token=f"UNSUBSCRIBE_{payload.question_id}")],
            ]
            return text, keyboard

        if isinstance(payload, QuestionApprovedPayload):
            text = (
                "✅ <b>Your Question is Live!</b>\n\n"
                f"<b>Question:</b> {preview(payload.question_text, 200)}\n\n"
                "+5 points added to your profile!"
            )
            keyboard = []
            url = channel_post_url(self.channel, payload.published_ref) if payload.published_ref else None
            if url:
                keyboard.append([Action("👀 See Question", url=url)])
            return text, keyboard

        if isinstance(payload, VoteReceivedPayload):
            label = "an Upvote" if payload.direction is VoteDirection.UP else "a Downvote"
            text = (
                f"👍 <b>Your Answer Got {label}!</b>\n\n"
                f"<b>Question:</b> {preview(payload.question_text, 50)}\n"
                f"<b>Your Answer:</b> {quote(payload.answer_preview)}"
            )
            keyboard = [[Action("👀 View Answer", token=f"CHANNEL_BROWSE_{payload.question_id}")]]
            return text, keyboard

        raise TypeError(f"Unhandled notification payload: {type(payload).__name__}")

    async def notify(self, session: AsyncSession, recipient_id: int, payload: NotificationPayload) -> Notification:
        """Persist one notification, then try to deliver it."""
        kind = KIND_BY_PAYLOAD[type(payload)]
        notification = await notification_repo.create_notification(
            session, recipient_id, kind, payload.model_dump(mode="json")
        )
        await session.commit()

        text, keyboard = self.render(payload)
        try:
            await self.transport.send_message(recipient_id, text, keyboard)
        except DeliveryFailed as e:
            logger.warning(f"Could not deliver {kind.value} notification {notification.id} to {recipient_id}: {e}")
        return notification

    async def fan_out_new_answer(self, session: AsyncSession, question: Question, answer: Answer) -> List[int]:
        """
        Notify the question author, then every subscriber, about a new answer.

        The answerer is never notified and nobody is notified twice.
        Returns the recipients in notification order.
        """
        payload = NewAnswerPayload(
            question_id=question.id,
            question_text=question.text,
            answer_id=answer.id,
            answer_preview=truncate(answer.text),
        )

        recipients: List[int] = []
        if question.author_id != answer.author_id:
            recipients.append(question.author_id)

        for subscriber_id in await subscription_repo.get_subscriber_ids(session, question.id):
            if subscriber_id in (answer.author_id, question.author_id) or subscriber_id in recipients:
                continue
            recipients.append(subscriber_id)

        for recipient_id in recipients:
            await self.notify(session, recipient_id, payload)

        logger.info(f"New answer {answer.id} on question {question.id} fanned out to {len(recipients)} users")
        return recipients

    async def recent(self, session: AsyncSession, user_id: int) -> Tuple[List[Notification], int]:
        """Last notifications for the menu and the unread count."""
        notifications = await notification_repo.get_recent(session, user_id, limit=RECENT_LIMIT)
        unread = await notification_repo.count_unread(session, user_id)
        return notifications, unread

    async def mark_read(self, session: AsyncSession, user_id: int, notification_id: int) -> bool:
        updated = await notification_repo.mark_read(session, user_id, notification_id)
        await session.commit()
        return updated

    async def mark_all_read(self, session: AsyncSession, user_id: int) -> int:
        updated = await notification_repo.mark_all_read(session, user_id)
        await session.commit()
        return updated

