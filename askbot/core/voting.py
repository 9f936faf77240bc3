"""
Voting engine.

An answer's vote count is always the sum of its signed votes: every change first
removes the voter's previous vote (reversing its delta) and then inserts the new
vote (applying its delta), both in one commit.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.errors import Forbidden, NotFound
from askbot.core.formatting import truncate
from askbot.core.notifications import NotificationDispatcher, VoteReceivedPayload
from askbot.db.models import VoteDirection
from askbot.db.repositories import answer_repo, question_repo, vote_repo


@dataclass
class VoteResult:
    answer_id: int
    votes: int
    direction: Optional[VoteDirection]


class VotingEngine:
    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher

    async def up(self, session: AsyncSession, voter_id: int, answer_id: int) -> VoteResult:
        return await self.cast(session, voter_id, answer_id, VoteDirection.UP)

    async def down(self, session: AsyncSession, voter_id: int, answer_id: int) -> VoteResult:
        return await self.cast(session, voter_id, answer_id, VoteDirection.DOWN)

    async def clear(self, session: AsyncSession, voter_id: int, answer_id: int) -> VoteResult:
        return await self.cast(session, voter_id, answer_id, None)

    async def cast(
        self,
        session: AsyncSession,
        voter_id: int,
        answer_id: int,
        direction: Optional[VoteDirection],
    ) -> VoteResult:
        """Set the voter's vote on an answer; ``None`` removes it."""
        answer = await answer_repo.get_for_update(session, answer_id)
        if answer is None:
            raise NotFound(f"answer {answer_id} does not exist")
        if answer.author_id == voter_id:
            raise Forbidden(f"user {voter_id} tried to vote on own answer {answer_id}")

        existing = await vote_repo.get_vote(session, voter_id, answer_id)
        if existing is None and direction is None:
            return VoteResult(answer_id, answer.votes, None)

        if existing is not None:
            previous = existing.value
            await vote_repo.remove_vote(session, voter_id, answer_id)
            await answer_repo.apply_vote_delta(session, answer_id, -previous)

        if direction is not None:
            await vote_repo.add_vote(session, voter_id, answer_id, direction.to_int())
            await answer_repo.apply_vote_delta(session, answer_id, direction.to_int())

        await session.commit()
        answer = await answer_repo.get_for_update(session, answer_id)
        logger.info(
            f"User {voter_id} vote on answer {answer_id}: {direction.value if direction else 'cleared'} "
            f"(total {answer.votes})"
        )

        if direction is not None:
            question = await question_repo.get(session, answer.question_id)
            await self.dispatcher.notify(
                session,
                answer.author_id,
                VoteReceivedPayload(
                    question_id=answer.question_id,
                    question_text=question.text if question else "",
                    answer_id=answer.id,
                    answer_preview=truncate(answer.text),
                    direction=direction,
                ),
            )
        return VoteResult(answer_id, answer.votes, direction)
