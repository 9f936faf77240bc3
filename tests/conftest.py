"""
Shared fixtures: an in-memory SQLite store with the real models, a recording
transport and the services wired the same way the bot wires them.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("BOT_TOKEN", "123456:TEST")

import askbot.db.models  # noqa: E402,F401
from askbot.bot.main import build_services  # noqa: E402
from askbot.core.config import Settings  # noqa: E402
from askbot.core.transport import Action, DeliveryFailed  # noqa: E402
from askbot.db.base import Base, get_session_factory  # noqa: E402
from askbot.db.repositories import user_repo  # noqa: E402

ADMIN_ID = 1000
CHANNEL = "@askchannel"
BOT_USERNAME = "ask_test_bot"


@dataclass
class SentMessage:
    chat_id: object
    text: str
    keyboard: List[List[Action]]
    message_id: int

    @property
    def tokens(self) -> List[str]:
        return [action.token for row in self.keyboard for action in row if action.token]


@dataclass
class FakeTransport:
    """Records outgoing messages. Chats in ``blocked`` refuse delivery."""
    sent: List[SentMessage] = field(default_factory=list)
    edits: List[tuple] = field(default_factory=list)
    blocked: set = field(default_factory=set)
    fail_edits: bool = False
    next_id: int = 500

    async def send_message(self, chat_id, text: str, keyboard: Sequence[Sequence[Action]] = ()) -> int:
        if chat_id in self.blocked:
            raise DeliveryFailed(f"chat {chat_id} blocked the bot")
        self.next_id += 1
        self.sent.append(SentMessage(chat_id, text, [list(row) for row in keyboard], self.next_id))
        return self.next_id

    async def edit_keyboard(self, chat_id, message_id: int, keyboard: Sequence[Sequence[Action]]) -> None:
        if self.fail_edits:
            raise DeliveryFailed("message can't be edited")
        self.edits.append((chat_id, message_id, [list(row) for row in keyboard]))

    def messages_to(self, chat_id) -> List[SentMessage]:
        return [message for message in self.sent if message.chat_id == chat_id]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    factory = get_session_factory(engine)
    async with factory() as session:
        yield session


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def settings():
    return Settings(BOT_TOKEN="123456:TEST", ADMIN_ID=ADMIN_ID, PUBLIC_CHANNEL=CHANNEL, BOT_USERNAME=BOT_USERNAME)


@pytest.fixture
def services(transport, settings) -> Dict[str, object]:
    return build_services(transport, settings, BOT_USERNAME)


@pytest.fixture
def make_user(session):
    async def _make_user(user_id: int, username: str):
        user, _ = await user_repo.get_or_create_user(session, user_id, username)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def live_question(session, services, make_user):
    """Submit and approve a question, returning it."""
    async def _live_question(author_id: int, text: str = "What is a good first programming language?",
                             topic: str = "💻 Technology", ref: int = 42):
        lifecycle = services["lifecycle"]
        question = await lifecycle.submit(session, author_id, text, topic)
        return await lifecycle.approve(session, ADMIN_ID, question.id, ref)

    return _live_question
