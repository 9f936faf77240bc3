from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from askbot.db.base import Base, utcnow


class VoteDirection(str, Enum):
    """Enum for vote directions."""
    UP = "up"
    DOWN = "down"

    def to_int(self) -> int:
        return 1 if self is VoteDirection.UP else -1

    @classmethod
    def from_int(cls, value: int) -> "VoteDirection":
        return cls.UP if value > 0 else cls.DOWN


class Vote(Base):
    """Per-user vote on an answer. At most one per (user, answer)."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "answer_id", name="uq_votes_user_answer"),
        CheckConstraint("value IN (1, -1)", name="value_sign"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    answer_id: Mapped[int] = mapped_column(ForeignKey("answers.id", ondelete="CASCADE"), index=True)

    # 1 = upvote, -1 = downvote
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    @property
    def direction(self) -> VoteDirection:
        return VoteDirection.from_int(self.value)

    def __repr__(self) -> str:
        return f"<Vote {self.user_id} on A{self.answer_id}: {self.value:+d}>"
