import pytest

from askbot.core.errors import Forbidden, NotFound
from askbot.db.models import NotificationType, VoteDirection
from askbot.db.repositories import answer_repo, notification_repo, vote_repo

ALICE = 1
BOB = 2
CAROL = 3


@pytest.fixture
def voting(services):
    return services["voting"]


@pytest.fixture
async def answer(session, services, make_user, live_question):
    """Bob's answer on Alice's question, with Carol around to vote."""
    for user_id, name in ((ALICE, "alice"), (BOB, "bob"), (CAROL, "carol")):
        await make_user(user_id, name)
    question = await live_question(ALICE)
    return await services["board"].post_answer(session, BOB, question.id, "Python, without a doubt.")


async def vote_notifications(session):
    return await notification_repo.get_for_user(session, BOB, NotificationType.VOTE_RECEIVED)


class TestVotingEngine:
    async def test_upvote_then_clear(self, session, voting, answer):
        result = await voting.up(session, CAROL, answer.id)
        assert result.votes == 1
        assert result.direction is VoteDirection.UP

        [notification] = await vote_notifications(session)
        assert notification.payload["direction"] == "up"
        assert notification.payload["answer_id"] == answer.id

        result = await voting.clear(session, CAROL, answer.id)
        assert result.votes == 0
        assert result.direction is None
        assert await vote_repo.get_vote(session, CAROL, answer.id) is None
        assert len(await vote_notifications(session)) == 1

    async def test_switching_direction_keeps_one_vote(self, session, voting, answer):
        await voting.up(session, CAROL, answer.id)
        result = await voting.down(session, CAROL, answer.id)

        assert result.votes == -1
        vote = await vote_repo.get_vote(session, CAROL, answer.id)
        assert vote.value == -1
        assert await vote_repo.count(session) == 1
        assert (await answer_repo.get_for_update(session, answer.id)).votes == -1
        assert len(await vote_notifications(session)) == 2

    async def test_repeated_upvote_counts_once(self, session, voting, answer):
        await voting.up(session, CAROL, answer.id)
        result = await voting.up(session, CAROL, answer.id)
        assert result.votes == 1

    async def test_votes_from_several_users(self, session, voting, answer):
        await voting.up(session, CAROL, answer.id)
        result = await voting.down(session, ALICE, answer.id)
        assert result.votes == 0
        assert await vote_repo.get_user_votes(session, CAROL, [answer.id]) == {answer.id: 1}

    async def test_clear_without_vote_is_noop(self, session, voting, transport, answer):
        sent_before = len(transport.sent)
        result = await voting.clear(session, CAROL, answer.id)

        assert result.votes == 0
        assert await vote_repo.count(session) == 0
        assert len(transport.sent) == sent_before

    async def test_self_vote_forbidden(self, session, voting, answer):
        with pytest.raises(Forbidden):
            await voting.up(session, BOB, answer.id)

        assert (await answer_repo.get_for_update(session, answer.id)).votes == 0
        assert await vote_repo.count(session) == 0
        assert await vote_notifications(session) == []

    async def test_missing_answer(self, session, voting, answer):
        with pytest.raises(NotFound):
            await voting.up(session, CAROL, answer.id + 100)

    async def test_downvote_notification_text(self, session, voting, transport, answer):
        await voting.down(session, CAROL, answer.id)
        text = transport.messages_to(BOB)[-1].text
        assert "a Downvote" in text
