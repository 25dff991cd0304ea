"""
User model with secure password storage.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from eventhub.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Always stored trimmed and lower-cased
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    events = relationship("Event", back_populates="host")
    registrations = relationship("Registration", back_populates="user")
    sessions = relationship("UserSession", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
