"""Posting and browsing answers on approved questions."""

from dataclasses import dataclass, field
from typing import Dict, List

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.core.errors import ModerationRejected, NotFound
from askbot.core.lifecycle import QuestionLifecycle
from askbot.core.moderation import ContentModerator
from askbot.core.notifications import NotificationDispatcher
from askbot.core.ranking import Award, award_points
from askbot.db.models import Answer, Question
from askbot.db.repositories import answer_repo, question_repo, subscription_repo, vote_repo

BROWSE_LIMIT = 10
RECENT_QUESTIONS_LIMIT = 10


@dataclass
class AnswerPage:
    """What one user sees when browsing a question's answers."""
    question: Question
    answers: List[Answer]
    total: int
    subscribed: bool
    # answer id -> the viewer's signed vote
    my_votes: Dict[int, int] = field(default_factory=dict)


class AnswerBoard:
    def __init__(self, moderator: ContentModerator, dispatcher: NotificationDispatcher, lifecycle: QuestionLifecycle):
        self.moderator = moderator
        self.dispatcher = dispatcher
        self.lifecycle = lifecycle

    async def get_live_question(self, session: AsyncSession, question_id: int) -> Question:
        question = await question_repo.get_for_update(session, question_id)
        if question is None or not question.approved:
            raise NotFound(f"question {question_id} is not live")
        return question

    async def post_answer(self, session: AsyncSession, author_id: int, question_id: int, text: str) -> Answer:
        """
        Store an answer and everything that goes with it.

        The answer, the question's answer count, the author's award and the
        auto-subscription are committed together. Fan-out and the channel counter
        refresh run afterwards and cannot undo the answer.
        """
        verdict = self.moderator.evaluate(text)
        if not verdict.allowed:
            raise ModerationRejected(verdict.reason)

        question = await self.get_live_question(session, question_id)

        answer = await answer_repo.create_answer(session, question_id, author_id, text)
        await question_repo.increment_answer_count(session, question_id)
        await award_points(session, author_id, Award.ANSWER_POSTED)
        await subscription_repo.add(session, author_id, question_id)
        await session.commit()
        logger.info(f"Answer {answer.id} posted by user {author_id} on question {question_id}")

        question = await question_repo.get_for_update(session, question_id)
        await self.dispatcher.fan_out_new_answer(session, question, answer)
        await self.lifecycle.refresh_channel_counter(question)
        return answer

    async def browse(self, session: AsyncSession, viewer_id: int, question_id: int) -> AnswerPage:
        question = await self.get_live_question(session, question_id)
        answers = await answer_repo.get_for_question(session, question_id, limit=BROWSE_LIMIT)
        total = await answer_repo.count_for_question(session, question_id)
        page = AnswerPage(
            question=question,
            answers=answers,
            total=total,
            subscribed=await subscription_repo.is_subscribed(session, viewer_id, question_id),
            my_votes=await vote_repo.get_user_votes(session, viewer_id, [answer.id for answer in answers]),
        )
        await self.lifecycle.refresh_channel_counter(question, total)
        return page

    async def recent_questions(self, session: AsyncSession) -> List[Question]:
        return await question_repo.get_approved(session, limit=RECENT_QUESTIONS_LIMIT)
