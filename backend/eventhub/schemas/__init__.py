from eventhub.schemas.user import CurrentUser
from eventhub.schemas.event import EventSummary, EventDetail
from eventhub.schemas.registration import NotificationOutcome, RegistrationResponse, RegistrationResult

__all__ = [
    "CurrentUser",
    "EventSummary", "EventDetail",
    "NotificationOutcome", "RegistrationResponse", "RegistrationResult",
]
