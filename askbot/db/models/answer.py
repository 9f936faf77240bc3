from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from askbot.db.base import Base, utcnow


class Answer(Base):
    """Answer to an approved question. The text never changes after creation."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(ForeignKey("questions.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    # Sum of signed votes, maintained by the voting engine
    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    question = relationship("Question", back_populates="answers")

    def __repr__(self) -> str:
        return f"<Answer {self.id} on Q{self.question_id}: {self.votes:+d}>"
