"""Community and operator statistics, counted straight from the store."""

from dataclasses import dataclass
from datetime import datetime, time

from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.base import utcnow
from askbot.db.models import Question
from askbot.db.repositories import answer_repo, question_repo, subscription_repo, user_repo, vote_repo


@dataclass
class CommunityStats:
    questions: int
    answers: int
    users: int
    votes: int

    @property
    def answers_per_question(self) -> float:
        return self.answers / self.questions if self.questions else 0.0

    @property
    def votes_per_answer(self) -> float:
        return self.votes / self.answers if self.answers else 0.0


@dataclass
class AdminStats:
    users: int
    questions: int
    pending: int
    approved: int
    answers: int
    votes: int
    subscriptions: int
    new_users_today: int
    questions_today: int
    answers_today: int


def start_of_today() -> datetime:
    return datetime.combine(utcnow().date(), time.min)


async def community_stats(session: AsyncSession) -> CommunityStats:
    return CommunityStats(
        questions=await question_repo.count(session, Question.approved.is_(True)),
        answers=await answer_repo.count(session),
        users=await user_repo.count(session),
        votes=await vote_repo.count(session),
    )


async def admin_stats(session: AsyncSession) -> AdminStats:
    """Full counts for the operator panel. Callers check operator rights."""
    today = start_of_today()
    approved = await question_repo.count(session, Question.approved.is_(True))
    pending = await question_repo.count(session, Question.approved.is_(False))
    return AdminStats(
        users=await user_repo.count(session),
        questions=approved + pending,
        pending=pending,
        approved=approved,
        answers=await answer_repo.count(session),
        votes=await vote_repo.count(session),
        subscriptions=await subscription_repo.count(session),
        new_users_today=await user_repo.count_joined_since(session, today),
        questions_today=await question_repo.count_created_since(session, today),
        answers_today=await answer_repo.count_created_since(session, today),
    )
