"""
Central router that aggregates all page route modules.
"""

from fastapi import APIRouter
from eventhub.api.routes import auth, events

web_router = APIRouter()
web_router.include_router(auth.router)
web_router.include_router(events.router)
