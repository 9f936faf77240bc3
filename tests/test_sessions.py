from datetime import timedelta

import pytest

from askbot.core.sessions import (
    AwaitingAnswer,
    AwaitingFeedback,
    AwaitingQuestion,
    AwaitingTopic,
    ConfirmQuestion,
    EditingQuestion,
    SessionStore,
)
from askbot.db.base import utcnow
from askbot.db.repositories import conversation_repo


class TestSessionStore:
    @pytest.mark.parametrize("state", [
        AwaitingQuestion(),
        AwaitingTopic(question="Why is the sky blue?"),
        AwaitingTopic(question="Why is the sky blue?", custom_topic=True),
        ConfirmQuestion(question="Why is the sky blue?", topic="Science"),
        EditingQuestion(question="Why is the sky blue?", topic="Science"),
        AwaitingAnswer(question_id=7, question_text="Why?", published_ref=42),
        AwaitingFeedback(),
    ])
    async def test_state_survives_storage(self, session, state):
        store = SessionStore()
        await store.save(session, 1, state)
        assert await store.get(session, 1) == state

    async def test_missing_session_is_none(self, session):
        assert await SessionStore().get(session, 1) is None

    async def test_save_overwrites_single_slot(self, session):
        store = SessionStore()
        await store.save(session, 1, AwaitingQuestion())
        await store.save(session, 1, AwaitingFeedback())

        assert isinstance(await store.get(session, 1), AwaitingFeedback)
        assert await conversation_repo.count(session) == 1

    async def test_sessions_are_per_user(self, session):
        store = SessionStore()
        await store.save(session, 1, AwaitingQuestion())
        await store.save(session, 2, AwaitingFeedback())

        assert isinstance(await store.get(session, 1), AwaitingQuestion)
        assert isinstance(await store.get(session, 2), AwaitingFeedback)

    async def test_clear(self, session):
        store = SessionStore()
        await store.save(session, 1, AwaitingQuestion())
        await store.clear(session, 1)
        assert await store.get(session, 1) is None

        # Clearing twice is harmless
        await store.clear(session, 1)

    async def test_no_ttl_keeps_old_sessions(self, session):
        store = SessionStore(ttl_minutes=0)
        await store.save(session, 1, AwaitingQuestion())
        row = await conversation_repo.get_by_user(session, 1)
        row.updated_at = utcnow() - timedelta(days=30)
        await session.commit()

        assert isinstance(await store.get(session, 1), AwaitingQuestion)

    async def test_ttl_expires_stale_sessions(self, session):
        store = SessionStore(ttl_minutes=30)
        await store.save(session, 1, AwaitingQuestion())
        row = await conversation_repo.get_by_user(session, 1)
        row.updated_at = utcnow() - timedelta(minutes=31)
        await session.commit()

        assert await store.get(session, 1) is None
        assert await conversation_repo.get_by_user(session, 1) is None

    async def test_unreadable_row_is_discarded(self, session):
        await conversation_repo.upsert(session, 1, '{"step": "dancing"}')
        await session.commit()

        assert await SessionStore().get(session, 1) is None
        assert await conversation_repo.get_by_user(session, 1) is None
