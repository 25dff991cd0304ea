"""
Pydantic schemas for registration results.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class NotificationOutcome(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"  # no SMTP transport configured
    FAILED = "failed"


class RegistrationResponse(BaseModel):
    id: int
    event_id: int
    user_id: int
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RegistrationResult(BaseModel):
    registration: RegistrationResponse
    notification: NotificationOutcome
