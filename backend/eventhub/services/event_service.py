"""
Event service handling creation and the list/detail reads.

Registration counts are never stored; every read computes them with a
correlated COUNT over the registrations table.
"""

import re
from typing import Optional, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.models.event import Event, MIN_CAPACITY, MAX_CAPACITY
from eventhub.models.registration import Registration
from eventhub.models.user import User
from eventhub.schemas.event import EventSummary, EventDetail
from eventhub.core.config import get_settings
from eventhub.core.exceptions import ValidationError, NotFoundError
from eventhub.core.metrics import record_event_created
from eventhub.core.logging import get_logger

logger = get_logger(__name__)

CAPACITY_MESSAGE = f"Capacity must be {MIN_CAPACITY}–{MAX_CAPACITY}."
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_capacity(raw: Union[int, str, None]) -> int:
    """Empty input falls back to DEFAULT_CAPACITY; anything else must be an integer in range."""
    if isinstance(raw, bool):
        raise ValidationError(CAPACITY_MESSAGE)

    if isinstance(raw, int):
        capacity = raw
    else:
        text = (raw or "").strip()
        if not text:
            return get_settings().DEFAULT_CAPACITY
        if not _INTEGER.fullmatch(text):
            raise ValidationError(CAPACITY_MESSAGE)
        capacity = int(text)

    if capacity < MIN_CAPACITY or capacity > MAX_CAPACITY:
        raise ValidationError(CAPACITY_MESSAGE)
    return capacity


def registration_count_column():
    return (
        select(func.count(Registration.id))
        .where(Registration.event_id == Event.id)
        .correlate(Event)
        .scalar_subquery()
        .label("registration_count")
    )


def _event_query():
    return (
        select(Event, User.name.label("host_name"), registration_count_column())
        .join(User, User.id == Event.host_user_id)
    )


def _summary_fields(event: Event, host_name: str, registration_count: int) -> dict:
    return {
        "id": event.id,
        "host_user_id": event.host_user_id,
        "host_name": host_name,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "starts_at": event.starts_at,
        "capacity": event.capacity,
        "registration_count": registration_count,
        "created_at": event.created_at,
    }


async def create_event(
    db: AsyncSession,
    host_id: int,
    title: Optional[str],
    description: Optional[str],
    location: Optional[str],
    starts_at: Optional[str],
    capacity: Union[int, str, None],
) -> Event:
    """
    Create an event owned by `host_id`.
    The start time is stored as given; past dates are accepted.
    """
    title = (title or "").strip()
    description = (description or "").strip()
    location = (location or "").strip()
    starts_at = (starts_at or "").strip()

    if not title or not description or not location or not starts_at:
        raise ValidationError("Fill all required fields.")

    event = Event(
        host_user_id=host_id,
        title=title,
        description=description,
        location=location,
        starts_at=starts_at,
        capacity=parse_capacity(capacity),
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, host_id=host_id, title=event.title, capacity=event.capacity)
    record_event_created()
    return event


async def list_events(db: AsyncSession) -> list[EventSummary]:
    """All events with host name and live registration count, soonest first."""
    result = await db.execute(_event_query().order_by(Event.starts_at.asc(), Event.id.asc()))
    return [
        EventSummary(**_summary_fields(event, host_name, count))
        for event, host_name, count in result.all()
    ]


async def get_event(db: AsyncSession, event_id: int, viewer_id: Optional[int] = None) -> EventDetail:
    """One event, plus whether `viewer_id` (if any) already holds a place."""
    result = await db.execute(_event_query().where(Event.id == event_id))
    row = result.one_or_none()

    if row is None:
        raise NotFoundError()

    event, host_name, count = row
    is_registered = False
    if viewer_id is not None:
        existing = await db.execute(
            select(Registration.id).where(
                Registration.event_id == event_id,
                Registration.user_id == viewer_id,
            )
        )
        is_registered = existing.scalar_one_or_none() is not None

    return EventDetail(**_summary_fields(event, host_name, count), is_registered=is_registered)
