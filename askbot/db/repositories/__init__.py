"""Repository singletons."""

from askbot.db.repositories.user import user_repo
from askbot.db.repositories.question import question_repo
from askbot.db.repositories.answer import answer_repo
from askbot.db.repositories.vote import vote_repo
from askbot.db.repositories.subscription import subscription_repo
from askbot.db.repositories.notification import notification_repo
from askbot.db.repositories.conversation import conversation_repo

__all__ = [
    "user_repo",
    "question_repo",
    "answer_repo",
    "vote_repo",
    "subscription_repo",
    "notification_repo",
    "conversation_repo",
]
