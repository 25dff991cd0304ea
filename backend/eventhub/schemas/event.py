"""
Pydantic schemas for event rows handed to the templates.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventSummary(BaseModel):
    id: int
    host_user_id: int
    host_name: str
    title: str
    description: str
    location: str
    starts_at: str
    capacity: int
    registration_count: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @property
    def spots_left(self) -> int:
        return max(self.capacity - self.registration_count, 0)

    @property
    def is_full(self) -> bool:
        return self.registration_count >= self.capacity


class EventDetail(EventSummary):
    is_registered: bool = False
