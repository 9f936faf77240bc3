"""Points awards, profiles and the leaderboard. Rank is always recomputed on read."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.errors import NotFound
from askbot.db.repositories import user_repo

AWARD_POINTS = 5
LEADERBOARD_SIZE = 10


class Award(str, Enum):
    QUESTION_APPROVED = "question_approved"
    ANSWER_POSTED = "answer_posted"


async def award_points(session: AsyncSession, user_id: int, award: Award) -> None:
    """Apply a fixed award. This is the only way points change."""
    if award is Award.QUESTION_APPROVED:
        await user_repo.increment(session, user_id, points=AWARD_POINTS, questions_asked=1)
    elif award is Award.ANSWER_POSTED:
        await user_repo.increment(session, user_id, points=AWARD_POINTS, answers_given=1)
    else:
        raise ValueError(f"Unknown award: {award}")
    logger.debug(f"Awarded {award.value} to user {user_id}")


@dataclass
class Profile:
    user_id: int
    username: str
    points: int
    questions_asked: int
    answers_given: int
    join_date: datetime
    rank: int
    total_users: int


@dataclass
class LeaderboardEntry:
    position: int
    username: str
    points: int
    questions_asked: int
    answers_given: int


async def get_profile(session: AsyncSession, user_id: int) -> Profile:
    user = await user_repo.get_for_update(session, user_id)
    if user is None:
        raise NotFound(f"user {user_id} not registered")

    ranked_ids = await user_repo.get_ranked_ids(session)
    return Profile(
        user_id=user.id,
        username=user.username,
        points=user.points,
        questions_asked=user.questions_asked,
        answers_given=user.answers_given,
        join_date=user.join_date,
        rank=ranked_ids.index(user.id) + 1,
        total_users=len(ranked_ids),
    )


async def get_leaderboard(session: AsyncSession, limit: int = LEADERBOARD_SIZE) -> List[LeaderboardEntry]:
    users = await user_repo.get_ranked(session, limit=limit)
    return [
        LeaderboardEntry(
            position=position,
            username=user.username,
            points=user.points,
            questions_asked=user.questions_asked,
            answers_given=user.answers_given,
        )
        for position, user in enumerate(users, start=1)
    ]
