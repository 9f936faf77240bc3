from datetime import timedelta

import pytest

from askbot.core.errors import NotFound
from askbot.core.ranking import Award, award_points, get_leaderboard, get_profile
from askbot.core.statistics import admin_stats, community_stats
from askbot.db.base import utcnow
from askbot.db.repositories import user_repo

ALICE = 1
BOB = 2
CAROL = 3


class TestRanking:
    async def test_awards(self, session, make_user):
        await make_user(ALICE, "alice")
        await award_points(session, ALICE, Award.QUESTION_APPROVED)
        await award_points(session, ALICE, Award.ANSWER_POSTED)
        await award_points(session, ALICE, Award.ANSWER_POSTED)
        await session.commit()

        profile = await get_profile(session, ALICE)
        assert profile.points == 15
        assert profile.questions_asked == 1
        assert profile.answers_given == 2

    async def test_rank_and_total(self, session, make_user):
        for user_id, name in ((ALICE, "alice"), (BOB, "bob"), (CAROL, "carol")):
            await make_user(user_id, name)
        await award_points(session, BOB, Award.ANSWER_POSTED)
        await session.commit()

        bob = await get_profile(session, BOB)
        assert (bob.rank, bob.total_users) == (1, 3)
        assert (await get_profile(session, CAROL)).rank == 3

    async def test_ties_go_to_earlier_member(self, session, make_user):
        alice = await make_user(ALICE, "alice")
        bob = await make_user(BOB, "bob")
        bob.join_date = utcnow() - timedelta(days=1)
        alice.join_date = utcnow()
        await session.commit()

        assert (await get_profile(session, BOB)).rank == 1
        assert (await get_profile(session, ALICE)).rank == 2

    async def test_unregistered_user(self, session):
        with pytest.raises(NotFound):
            await get_profile(session, 404)

    async def test_leaderboard(self, session, make_user):
        for user_id in range(1, 13):
            await make_user(user_id, f"user{user_id}")
        await user_repo.increment(session, 7, points=50)
        await user_repo.increment(session, 3, points=20)
        await session.commit()

        board = await get_leaderboard(session)
        assert len(board) == 10
        assert [(entry.position, entry.username, entry.points) for entry in board[:2]] == [
            (1, "user7", 50),
            (2, "user3", 20),
        ]


class TestStatistics:
    async def test_counts(self, session, services, make_user, live_question):
        for user_id, name in ((ALICE, "alice"), (BOB, "bob"), (CAROL, "carol")):
            await make_user(user_id, name)
        question = await live_question(ALICE)
        await services["lifecycle"].submit(session, BOB, "Still waiting?", "🎯 Others")
        answer = await services["board"].post_answer(session, BOB, question.id, "Python.")
        await services["voting"].up(session, CAROL, answer.id)

        stats = await community_stats(session)
        assert (stats.questions, stats.answers, stats.users, stats.votes) == (1, 1, 3, 1)
        assert stats.answers_per_question == 1.0

        full = await admin_stats(session)
        assert (full.questions, full.pending, full.approved) == (2, 1, 1)
        assert full.subscriptions == 1
        assert full.new_users_today == 3
        assert full.answers_today == 1

    async def test_empty_store(self, session):
        stats = await community_stats(session)
        assert stats.answers_per_question == 0.0
        assert stats.votes_per_answer == 0.0
