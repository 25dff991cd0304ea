"""
Server-side session rows. The browser only ever holds the opaque `id`.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from eventhub.db.base import Base, TimestampMixin


class UserSession(Base, TimestampMixin):
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="sessions")

    def __repr__(self) -> str:
        return f"<UserSession(user={self.user_id})>"
