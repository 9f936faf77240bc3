"""Database models."""

from askbot.db.models.user import User
from askbot.db.models.question import Question
from askbot.db.models.answer import Answer
from askbot.db.models.conversation import ConversationSession
from askbot.db.models.subscription import Subscription
from askbot.db.models.vote import Vote, VoteDirection
from askbot.db.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "Question",
    "Answer",
    "ConversationSession",
    "Subscription",
    "Vote",
    "VoteDirection",
    "Notification",
    "NotificationType",
]
