from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askbot.db.base import Base, utcnow


class Question(Base):
    """Question model. Created pending; approval publishes it to the channel."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True)

    # Question content
    text: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(String(100), nullable=False)

    # Question status
    approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    published_ref: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    answer_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    # Relationships
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Question {self.id}: {self.text[:30]}...>"
