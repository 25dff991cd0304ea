"""
Per-request dependencies: session resolution and the auth gate.

Every route receives an explicit RequestContext instead of reading a
global "current user".
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.db.session import get_db
from eventhub.schemas.user import CurrentUser
from eventhub.services.session_service import resolve_session
from eventhub.core.config import get_settings
from eventhub.core.exceptions import LoginRequired, NotFoundError

settings = get_settings()


@dataclass(frozen=True)
class RequestContext:
    user: Optional[CurrentUser] = None
    # Raw cookie value, kept even if it no longer maps to a session
    session_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


async def get_request_context(request: Request, db: AsyncSession = Depends(get_db)) -> RequestContext:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    user = await resolve_session(db, token)

    context = RequestContext(user=user, session_token=token)
    # Exception handlers have no dependency injection; they read it from here
    request.state.context = context
    if user:
        structlog.contextvars.bind_contextvars(user_id=user.id)
    return context


async def require_user(context: RequestContext = Depends(get_request_context)) -> RequestContext:
    if not context.is_authenticated:
        raise LoginRequired()
    return context


def set_session_cookie(response: Response, token: str) -> None:
    # No max_age/expires: the cookie lives for the browser session
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


def event_id_path(event_id: str) -> int:
    """Resolve the {event_id} path segment; anything but a plain number names no event."""
    if not (event_id.isascii() and event_id.isdigit()):
        raise NotFoundError()
    return int(event_id)
