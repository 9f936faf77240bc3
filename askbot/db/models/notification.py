from datetime import datetime
from enum import Enum
from typing import Any, Dict

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from askbot.db.base import Base, utcnow


class NotificationType(str, Enum):
    """Enum for notification kinds."""
    NEW_ANSWER = "new_answer"
    QUESTION_APPROVED = "question_approved"
    VOTE_RECEIVED = "vote_received"


class Notification(Base):
    """Notification record. Only the read flag changes after creation."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    @property
    def kind(self) -> NotificationType:
        return NotificationType(self.type)

    def __repr__(self) -> str:
        return f"<Notification {self.id} {self.type} -> {self.user_id}>"
