"""
EventHub - Main Application Entry Point

A small event-signup site:
- Accounts with bcrypt-hashed passwords and server-side cookie sessions
- Events with a capacity, enforced with a conditional insert
- Best-effort confirmation email over SMTP
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from eventhub.core.config import get_settings
from eventhub.core.logging import setup_logging, get_logger
from eventhub.core.metrics import metrics_endpoint
from eventhub.api.router import web_router
from eventhub.api.errors import register_exception_handlers
from eventhub.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from eventhub.db.session import init_db, close_db

settings = get_settings()

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        base_url=settings.base_url,
    )

    if settings.AUTO_CREATE_TABLES:
        await init_db()
        logger.info("database_ready")

    if not settings.SMTP_HOST:
        logger.warning("smtp_unconfigured", message="Registration emails will be skipped")

    yield

    await close_db()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event signup site with capacity-limited registration",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(web_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for load balancers and uptime checks."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "smtp_configured": bool(settings.SMTP_HOST),
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


def run() -> None:
    """Console entry point: `eventhub`."""
    uvicorn.run("eventhub.main:app", host="0.0.0.0", port=settings.PORT)
