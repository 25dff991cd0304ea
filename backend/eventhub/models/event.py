"""
Event model.

Key design decisions:
- No denormalized seat counter: the registration count is computed from the
  registrations table on every read, so it can never drift.
- `starts_at` is stored exactly as submitted and ordered as a string.
- Capacity range is mirrored by a CHECK constraint.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from eventhub.db.base import Base, TimestampMixin

MIN_CAPACITY = 1
MAX_CAPACITY = 5000


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    host_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    starts_at = Column(String(64), nullable=False)
    capacity = Column(Integer, nullable=False, default=50)

    # Relationships
    host = relationship("User", back_populates="events")
    registrations = relationship("Registration", back_populates="event")

    __table_args__ = (
        CheckConstraint(
            f"capacity >= {MIN_CAPACITY} AND capacity <= {MAX_CAPACITY}",
            name="check_event_capacity_range",
        ),
        # Listing is always ordered by start time
        Index("ix_events_starts_at", "starts_at"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, capacity={self.capacity})>"
