from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from askbot.db.base import Base, utcnow


class User(Base):
    """User model. The primary key is the Telegram user id."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)

    # Stats, only ever changed through point awards
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    questions_asked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    answers_given: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    join_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.username} ({self.points} pts)>"
