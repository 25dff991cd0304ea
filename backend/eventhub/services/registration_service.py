"""
Registration service enforcing event capacity.

CAPACITY STRATEGY: advisory check + conditional insert
======================================================

Problem:
  Two users try to take the last place at the same time. Both read
  count = capacity - 1, both insert, and the event ends up over capacity.

Solution:
  1. Read the event with its live registration count and reject early if it
     is already full. This gives the common case a clean error without
     touching the registrations table.
  2. Insert with a single statement that re-checks the count:

       INSERT INTO registrations (event_id, user_id)
       SELECT :event_id, :user_id
       WHERE (SELECT COUNT(*) FROM registrations WHERE event_id = :event_id)
           < (SELECT capacity FROM events WHERE id = :event_id)

     The comparison and the insert run as one statement under the store's
     write lock, so a registration that lost the race inserts zero rows
     instead of overfilling the event.
  3. The UNIQUE(event_id, user_id) constraint rejects a second place for the
     same user, including two racing requests from the same browser.

Mail is sent only after the insert is committed. Its outcome is returned,
never raised.
"""

from typing import Optional

from sqlalchemy import select, insert, func, literal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.models.event import Event
from eventhub.models.registration import Registration
from eventhub.schemas.user import CurrentUser
from eventhub.schemas.registration import RegistrationResponse, RegistrationResult
from eventhub.services.event_service import get_event
from eventhub.services.notification_service import Mailer, notify_registration
from eventhub.core.exceptions import AlreadyRegisteredError, CapacityExceededError, NotFoundError
from eventhub.core.metrics import record_registration_attempt
from eventhub.core.logging import get_logger

logger = get_logger(__name__)


def _conditional_insert(event_id: int, user_id: int):
    registered = (
        select(func.count(Registration.id))
        .where(Registration.event_id == event_id)
        .scalar_subquery()
    )
    capacity = select(Event.capacity).where(Event.id == event_id).scalar_subquery()

    return insert(Registration.__table__).from_select(
        ["event_id", "user_id"],
        select(literal(event_id), literal(user_id)).where(registered < capacity),
    )


async def _find_registration(db: AsyncSession, event_id: int, user_id: int) -> Optional[Registration]:
    result = await db.execute(
        select(Registration).where(
            Registration.event_id == event_id,
            Registration.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def register_for_event(
    db: AsyncSession,
    event_id: int,
    user: CurrentUser,
    mailer: Optional[Mailer] = None,
    base_url: str = "",
) -> RegistrationResult:
    """
    Give `user` a place at the event.

    Raises NotFoundError, CapacityExceededError or AlreadyRegisteredError.
    """
    try:
        event = await get_event(db, event_id)
    except NotFoundError:
        record_registration_attempt("not_found")
        raise

    if event.registration_count >= event.capacity:
        logger.warning(
            "registration_failed_full",
            event_id=event_id,
            user_id=user.id,
            capacity=event.capacity,
        )
        record_registration_attempt("full")
        raise CapacityExceededError()

    try:
        result = await db.execute(_conditional_insert(event_id, user.id))
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await _find_registration(db, event_id, user.id) is None:
            raise
        logger.info("registration_failed_duplicate", event_id=event_id, user_id=user.id)
        record_registration_attempt("duplicate")
        raise AlreadyRegisteredError()

    if result.rowcount == 0:
        # Filled up between the read and the insert
        logger.warning("registration_failed_full", event_id=event_id, user_id=user.id, raced=True)
        record_registration_attempt("full")
        raise CapacityExceededError()

    registration = await _find_registration(db, event_id, user.id)
    logger.info("registration_created", registration_id=registration.id, event_id=event_id, user_id=user.id)
    record_registration_attempt("success")

    outcome = await notify_registration(
        mailer,
        to_address=user.email,
        event_title=event.title,
        starts_at=event.starts_at,
        location=event.location,
        link=f"{base_url}/events/{event_id}",
    )

    return RegistrationResult(
        registration=RegistrationResponse.model_validate(registration),
        notification=outcome,
    )
