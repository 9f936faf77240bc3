"""
Per-user conversation state.

Each user has at most one in-flight conversation step. The step and its payload are
a tagged union of pydantic models, serialized to JSON in the ``sessions`` table.
"""

from datetime import timedelta
from typing import Annotated, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from askbot.db.base import utcnow
from askbot.db.repositories import conversation_repo


class AwaitingQuestion(BaseModel):
    step: Literal["awaiting_question"] = "awaiting_question"


class AwaitingTopic(BaseModel):
    step: Literal["awaiting_topic"] = "awaiting_topic"
    question: str
    # True while the user is typing a topic of their own
    custom_topic: bool = False


class ConfirmQuestion(BaseModel):
    step: Literal["confirm_question"] = "confirm_question"
    question: str
    topic: str


class EditingQuestion(BaseModel):
    step: Literal["editing_question"] = "editing_question"
    question: str
    topic: str


class AwaitingAnswer(BaseModel):
    step: Literal["awaiting_answer"] = "awaiting_answer"
    question_id: int
    question_text: str
    published_ref: Optional[int] = None


class AwaitingFeedback(BaseModel):
    step: Literal["awaiting_feedback"] = "awaiting_feedback"


SessionState = Annotated[
    Union[
        AwaitingQuestion,
        AwaitingTopic,
        ConfirmQuestion,
        EditingQuestion,
        AwaitingAnswer,
        AwaitingFeedback,
    ],
    Field(discriminator="step"),
]

state_adapter: TypeAdapter[SessionState] = TypeAdapter(SessionState)


class SessionStore:
    """Single-slot conversation store. Every write is committed immediately."""

    def __init__(self, ttl_minutes: int = 0):
        self.ttl = timedelta(minutes=ttl_minutes) if ttl_minutes > 0 else None

    async def get(self, session: AsyncSession, user_id: int) -> Optional[SessionState]:
        row = await conversation_repo.get_by_user(session, user_id)
        if row is None:
            return None

        if self.ttl is not None and utcnow() - row.updated_at > self.ttl:
            logger.info(f"Session for user {user_id} expired, discarding")
            await self.clear(session, user_id)
            return None

        try:
            return state_adapter.validate_json(row.state_data)
        except ValidationError as e:
            # Rows written by an older schema are treated as absent
            logger.warning(f"Unreadable session for user {user_id}, discarding: {e}")
            await self.clear(session, user_id)
            return None

    async def save(self, session: AsyncSession, user_id: int, state: SessionState) -> None:
        """Overwrite the user's session with a new state."""
        await conversation_repo.upsert(session, user_id, state.model_dump_json())
        await session.commit()
        logger.debug(f"User {user_id} session -> {state.step}")

    async def clear(self, session: AsyncSession, user_id: int) -> None:
        await conversation_repo.delete_by_user(session, user_id)
        await session.commit()
