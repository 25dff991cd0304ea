"""
Domain exceptions raised by the service layer.

These are not HTTP exceptions. Each one carries a human-readable message
that the route re-renders inline, plus the status code that page is served
with. Translation to responses happens in the routes and in the app-wide
handlers registered by `eventhub.api.errors`.
"""

from typing import Optional

from fastapi import status


class EventHubError(Exception):
    """Base class for user-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(EventHubError):
    """Missing or malformed form input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Fill all required fields."


class DuplicateEmailError(EventHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered."


class InvalidCredentialsError(EventHubError):
    """
    Raised for both an unknown email and a wrong password so the response
    never reveals which accounts exist.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password."


class NotFoundError(EventHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Event not found"


class CapacityExceededError(EventHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Event is full."


class AlreadyRegisteredError(EventHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "You're already registered for this event."


class NotificationError(EventHubError):
    """Mail delivery failed. Logged and discarded, never shown to the user."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Email delivery failed."


class LoginRequired(EventHubError):
    """Raised by the auth gate; the app-wide handler redirects to /login."""

    status_code = status.HTTP_303_SEE_OTHER
    default_message = "Log in to continue."
