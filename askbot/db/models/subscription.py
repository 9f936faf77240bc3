from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from askbot.db.base import Base, utcnow


class Subscription(Base):
    """A user wants to hear about new answers on a question."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_subscriptions_user_question"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    question_id: Mapped[int] = mapped_column(ForeignKey("questions.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def __repr__(self) -> str:
        return f"<Subscription {self.user_id} -> Q{self.question_id}>"
