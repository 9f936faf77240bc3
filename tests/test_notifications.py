import pytest

from askbot.core.errors import NotFound
from askbot.core.notifications import (
    NewAnswerPayload,
    QuestionApprovedPayload,
    VoteReceivedPayload,
    channel_post_url,
    parse_payload,
)
from askbot.db.models import NotificationType, VoteDirection
from askbot.db.repositories import notification_repo, subscription_repo

ALICE = 1
BOB = 2
CAROL = 3
DAVE = 4


@pytest.fixture
async def users(make_user):
    for user_id, name in ((ALICE, "alice"), (BOB, "bob"), (CAROL, "carol"), (DAVE, "dave")):
        await make_user(user_id, name)


@pytest.fixture
def notifier(services):
    return services["notifier"]


@pytest.fixture
def board(services):
    return services["board"]


@pytest.fixture
def registry(services):
    return services["registry"]


async def new_answer_recipients(session, *user_ids):
    counts = {}
    for user_id in user_ids:
        counts[user_id] = len(await notification_repo.get_for_user(session, user_id, NotificationType.NEW_ANSWER))
    return counts


class TestSubscriptions:
    async def test_subscribe_twice_keeps_one_row(self, session, registry, live_question, users):
        question = await live_question(ALICE)

        assert await registry.subscribe(session, CAROL, question.id)
        assert not await registry.subscribe(session, CAROL, question.id)
        assert await subscription_repo.get_subscriber_ids(session, question.id) == [CAROL]

    async def test_unsubscribe(self, session, registry, live_question, users):
        question = await live_question(ALICE)
        await registry.subscribe(session, CAROL, question.id)

        assert await registry.unsubscribe(session, CAROL, question.id)
        assert not await registry.is_subscribed(session, CAROL, question.id)
        assert not await registry.unsubscribe(session, CAROL, question.id)

    async def test_pending_question_cannot_be_subscribed(self, session, registry, services, users):
        question = await services["lifecycle"].submit(session, ALICE, "Is this normal?", "🎯 Others")
        with pytest.raises(NotFound):
            await registry.subscribe(session, CAROL, question.id)

    async def test_list_for_user(self, session, registry, live_question, users):
        first = await live_question(ALICE, "First question?")
        second = await live_question(BOB, "Second question?")
        await registry.subscribe(session, CAROL, first.id)
        await registry.subscribe(session, CAROL, second.id)

        listed = await registry.list_for_user(session, CAROL)
        assert {question.id for _, question in listed} == {first.id, second.id}


class TestNewAnswerFanOut:
    async def test_author_then_subscribers(self, session, board, registry, live_question, users):
        question = await live_question(ALICE)

        await board.post_answer(session, BOB, question.id, "Python, without a doubt.")
        assert await new_answer_recipients(session, ALICE, BOB) == {ALICE: 1, BOB: 0}
        # Answering subscribes the answerer
        assert await registry.is_subscribed(session, BOB, question.id)

        await registry.subscribe(session, CAROL, question.id)
        await board.post_answer(session, DAVE, question.id, "JavaScript runs everywhere.")
        assert await new_answer_recipients(session, ALICE, BOB, CAROL, DAVE) == {
            ALICE: 2, BOB: 1, CAROL: 1, DAVE: 0,
        }

    async def test_fan_out_order_and_answerer_excluded(self, session, notifier, board, registry, live_question, users):
        question = await live_question(ALICE)
        await registry.subscribe(session, CAROL, question.id)
        await registry.subscribe(session, DAVE, question.id)

        answer = await board.post_answer(session, DAVE, question.id, "Start with Python.")
        recipients = await notifier.fan_out_new_answer(session, question, answer)
        assert recipients == [ALICE, CAROL]

    async def test_subscribed_author_notified_once(self, session, board, registry, live_question, users):
        question = await live_question(ALICE)
        await registry.subscribe(session, ALICE, question.id)

        await board.post_answer(session, BOB, question.id, "Python, without a doubt.")
        assert await new_answer_recipients(session, ALICE) == {ALICE: 1}

    async def test_author_answering_own_question(self, session, board, live_question, users):
        question = await live_question(ALICE)
        await board.post_answer(session, ALICE, question.id, "Answering myself.")
        assert await new_answer_recipients(session, ALICE) == {ALICE: 0}

    async def test_blocked_recipient_still_gets_row(self, session, board, transport, live_question, users):
        question = await live_question(ALICE)
        transport.blocked.add(ALICE)

        answer = await board.post_answer(session, BOB, question.id, "Python, without a doubt.")
        assert answer.id is not None
        assert await new_answer_recipients(session, ALICE) == {ALICE: 1}
        assert await notification_repo.count_unread(session, ALICE) >= 1

    async def test_answer_updates_channel_counter(self, session, board, transport, live_question, users):
        question = await live_question(ALICE)
        await board.post_answer(session, BOB, question.id, "Python, without a doubt.")

        [(_, message_id, keyboard)] = transport.edits
        assert message_id == 42
        assert keyboard[0][1].label == "🔍 Browse (1)"


class TestReadState:
    async def test_mark_read_and_mark_all(self, session, notifier, board, live_question, users):
        question = await live_question(ALICE)
        await board.post_answer(session, BOB, question.id, "First.")
        await board.post_answer(session, CAROL, question.id, "Second.")

        notifications, unread = await notifier.recent(session, ALICE)
        # One approval and two new answers
        assert unread == 3
        assert notifications[0].kind is NotificationType.NEW_ANSWER

        assert await notifier.mark_read(session, ALICE, notifications[0].id)
        assert await notifier.mark_read(session, ALICE, notifications[0].id)
        assert await notification_repo.count_unread(session, ALICE) == 2

        assert await notifier.mark_all_read(session, ALICE) == 2
        assert await notifier.mark_all_read(session, ALICE) == 0
        assert await notification_repo.count_unread(session, ALICE) == 0

    async def test_cannot_mark_someone_elses(self, session, notifier, live_question, users):
        await live_question(ALICE)
        [notification] = await notification_repo.get_for_user(session, ALICE)

        assert not await notifier.mark_read(session, BOB, notification.id)
        assert await notification_repo.count_unread(session, ALICE) == 1


class TestRender:
    def test_new_answer(self, notifier):
        text, keyboard = notifier.render(NewAnswerPayload(
            question_id=7, question_text="Why?", answer_id=3, answer_preview="Because <reasons>",
        ))
        assert "New Answer" in text
        assert "&lt;reasons&gt;" in text
        assert [row[0].token for row in keyboard] == ["CHANNEL_BROWSE_7", "UNSUBSCRIBE_7"]

    def test_question_approved_links_channel_post(self, notifier):
        text, keyboard = notifier.render(QuestionApprovedPayload(question_id=7, question_text="Why?", published_ref=9))
        assert "Live" in text
        assert keyboard[0][0].url == "https://t.me/askchannel/9"

    def test_vote_received(self, notifier):
        text, keyboard = notifier.render(VoteReceivedPayload(
            question_id=7, question_text="Why?", answer_id=3, answer_preview="Because", direction=VoteDirection.UP,
        ))
        assert "an Upvote" in text
        assert keyboard[0][0].token == "CHANNEL_BROWSE_7"

    def test_unknown_payload(self, notifier):
        with pytest.raises(TypeError):
            notifier.render(object())

    def test_channel_post_url(self):
        assert channel_post_url("@askchannel", 9) == "https://t.me/askchannel/9"
        assert channel_post_url("-100123", 9) is None

    async def test_stored_payload_parses_back(self, session, notifier, users):
        payload = QuestionApprovedPayload(question_id=7, question_text="Why?", published_ref=9)
        notification = await notifier.notify(session, ALICE, payload)
        assert parse_payload(notification) == payload
