"""
Event pages: listing, creation, detail and registration.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.api.deps import RequestContext, event_id_path, get_request_context, require_user
from eventhub.api.templating import render
from eventhub.db.session import get_db
from eventhub.schemas.registration import NotificationOutcome
from eventhub.services.event_service import create_event, get_event, list_events
from eventhub.services.notification_service import Mailer, get_mailer
from eventhub.services.registration_service import register_for_event
from eventhub.core.config import get_settings
from eventhub.core.exceptions import ValidationError, CapacityExceededError, AlreadyRegisteredError

settings = get_settings()
router = APIRouter(tags=["Events"])


@router.get("/")
async def index(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    events = await list_events(db)
    return render(request, "index.html", context, events=events)


# Declared before /events/{event_id} so "new" is never read as an id
@router.get("/events/new")
async def new_event_form(request: Request, context: RequestContext = Depends(require_user)):
    return render(request, "new_event.html", context, error=None, form={})


@router.post("/events/new")
async def create_event_endpoint(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    location: str = Form(""),
    starts_at: str = Form(""),
    capacity: str = Form(""),
    context: RequestContext = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Create an event hosted by the current user."""
    try:
        event = await create_event(db, context.user.id, title, description, location, starts_at, capacity)
    except ValidationError as e:
        return render(
            request,
            "new_event.html",
            context,
            status_code=e.status_code,
            error=e.message,
            form={
                "title": title,
                "description": description,
                "location": location,
                "starts_at": starts_at,
                "capacity": capacity,
            },
        )
    return RedirectResponse(f"/events/{event.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/events/{event_id}")
async def event_detail(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    event_id: int = Depends(event_id_path),
    db: AsyncSession = Depends(get_db),
):
    viewer_id = context.user.id if context.user else None
    event = await get_event(db, event_id, viewer_id)
    return render(request, "event.html", context, event=event, error=None, ok=None)


@router.post("/events/{event_id}/register")
async def register_endpoint(
    request: Request,
    context: RequestContext = Depends(require_user),
    event_id: int = Depends(event_id_path),
    db: AsyncSession = Depends(get_db),
    mailer: Optional[Mailer] = Depends(get_mailer),
):
    """
    Take a place at the event. The page is re-rendered with the outcome;
    email delivery never changes it.
    """
    try:
        result = await register_for_event(db, event_id, context.user, mailer, settings.base_url)
    except (CapacityExceededError, AlreadyRegisteredError) as e:
        event = await get_event(db, event_id, context.user.id)
        return render(request, "event.html", context, status_code=e.status_code, event=event, error=e.message, ok=None)

    ok = "You're registered ✅"
    if result.notification == NotificationOutcome.SENT:
        ok += " A confirmation email is on its way."

    event = await get_event(db, event_id, context.user.id)
    return render(request, "event.html", context, event=event, error=None, ok=ok)
