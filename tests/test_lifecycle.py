import pytest

from askbot.core.errors import AlreadyApproved, Forbidden, ModerationRejected, NotFound, QAError
from askbot.db.models import NotificationType
from askbot.db.repositories import notification_repo, question_repo, user_repo
from tests.conftest import ADMIN_ID, BOT_USERNAME, CHANNEL

AUTHOR = 1
STRANGER = 2


@pytest.fixture
def lifecycle(services):
    return services["lifecycle"]


@pytest.fixture
async def author(make_user):
    return await make_user(AUTHOR, "author")


class TestSubmit:
    async def test_pending_question_goes_to_review(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")

        assert not question.approved
        assert question.published_ref is None
        assert question.answer_count == 0

        [review] = transport.messages_to(ADMIN_ID)
        assert "Is this normal?" in review.text
        assert review.tokens == [f"APPROVE_{question.id}", f"REJECT_{question.id}"]

    async def test_banned_text_creates_nothing(self, session, lifecycle, transport, author):
        with pytest.raises(ModerationRejected) as exc_info:
            await lifecycle.submit(session, AUTHOR, "totally not a scam", "💼 Business")

        assert exc_info.value.reason == "Contains banned content"
        assert await question_repo.count(session) == 0
        assert transport.sent == []

    async def test_unreachable_operator_keeps_question(self, session, lifecycle, transport, author):
        transport.blocked.add(ADMIN_ID)
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        assert await question_repo.get(session, question.id) is not None


class TestApprove:
    async def test_approval_rewards_author_once(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal???", "💻 Technology")
        approved = await lifecycle.approve(session, ADMIN_ID, question.id, 42)

        assert approved.approved
        assert approved.published_ref == 42

        user = await user_repo.get_for_update(session, AUTHOR)
        assert user.points == 5
        assert user.questions_asked == 1

        [notification] = await notification_repo.get_for_user(session, AUTHOR)
        assert notification.kind is NotificationType.QUESTION_APPROVED
        assert notification.payload["published_ref"] == 42

        [live] = transport.messages_to(AUTHOR)
        assert "Your Question is Live" in live.text
        assert live.keyboard[0][0].url == f"https://t.me/{CHANNEL.lstrip('@')}/42"

    async def test_second_approval_rejected_without_reward(self, session, lifecycle, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        await lifecycle.approve(session, ADMIN_ID, question.id, 42)

        with pytest.raises(AlreadyApproved):
            await lifecycle.approve(session, ADMIN_ID, question.id, 43)

        assert (await user_repo.get_for_update(session, AUTHOR)).points == 5
        assert (await question_repo.get_for_update(session, question.id)).published_ref == 42

    async def test_only_operator_may_approve(self, session, lifecycle, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")

        with pytest.raises(Forbidden):
            await lifecycle.approve(session, STRANGER, question.id, 42)
        assert not (await question_repo.get_for_update(session, question.id)).approved

    async def test_missing_question(self, session, lifecycle):
        with pytest.raises(NotFound):
            await lifecycle.approve(session, ADMIN_ID, 404, 42)


class TestPublish:
    async def test_posts_to_channel_and_stores_message_id(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        published = await lifecycle.publish(session, ADMIN_ID, question.id)

        [post] = transport.messages_to(CHANNEL)
        assert published.approved
        assert published.published_ref == post.message_id
        assert "Is this normal?" in post.text
        assert "Anonymous" in post.text
        assert post.tokens == [f"CHANNEL_ANSWER_{question.id}", f"CHANNEL_BROWSE_{question.id}"]
        assert post.keyboard[1][0].url == f"https://t.me/{BOT_USERNAME}?start=channel_{question.id}"

    async def test_failed_post_leaves_question_pending(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        transport.blocked.add(CHANNEL)

        with pytest.raises(QAError) as exc_info:
            await lifecycle.publish(session, ADMIN_ID, question.id)

        assert "channel" in exc_info.value.user_message
        assert not (await question_repo.get_for_update(session, question.id)).approved
        assert (await user_repo.get_for_update(session, AUTHOR)).points == 0

    async def test_stranger_cannot_publish(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        with pytest.raises(Forbidden):
            await lifecycle.publish(session, STRANGER, question.id)
        assert transport.messages_to(CHANNEL) == []


class TestReject:
    async def test_reject_deletes_and_tells_author(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        await lifecycle.reject(session, ADMIN_ID, question.id)

        assert await question_repo.get(session, question.id) is None
        [message] = transport.messages_to(AUTHOR)
        assert "Not Approved" in message.text
        assert message.tokens == ["START_QUESTION"]

    async def test_reject_approved_question(self, session, lifecycle, live_question, author):
        question = await live_question(AUTHOR)
        with pytest.raises(NotFound):
            await lifecycle.reject(session, ADMIN_ID, question.id)
        assert await question_repo.get(session, question.id) is not None

    async def test_reject_twice(self, session, lifecycle, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        await lifecycle.reject(session, ADMIN_ID, question.id)
        with pytest.raises(NotFound):
            await lifecycle.reject(session, ADMIN_ID, question.id)

    async def test_unreachable_author(self, session, lifecycle, transport, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        transport.blocked.add(AUTHOR)
        await lifecycle.reject(session, ADMIN_ID, question.id)
        assert await question_repo.get(session, question.id) is None

    async def test_stranger_cannot_reject(self, session, lifecycle, author):
        question = await lifecycle.submit(session, AUTHOR, "Is this normal?", "💻 Technology")
        with pytest.raises(Forbidden):
            await lifecycle.reject(session, STRANGER, question.id)


class TestChannelCounter:
    async def test_counter_refresh(self, session, lifecycle, transport, live_question, author):
        question = await live_question(AUTHOR)
        await lifecycle.refresh_channel_counter(question, 3)

        [(chat_id, message_id, keyboard)] = transport.edits
        assert (chat_id, message_id) == (CHANNEL, 42)
        assert keyboard[0][1].label == "🔍 Browse (3)"

    async def test_failed_edit_is_ignored(self, session, lifecycle, transport, live_question, author):
        question = await live_question(AUTHOR)
        transport.fail_edits = True
        await lifecycle.refresh_channel_counter(question)
        assert transport.edits == []
