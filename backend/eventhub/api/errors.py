"""
App-wide exception handlers.

Routes catch the user-correctable errors themselves so they can re-render
the form they came from. What is left is handled here: the auth gate,
missing events, and unexpected database failures.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from eventhub.api.templating import render
from eventhub.core.exceptions import LoginRequired, NotFoundError
from eventhub.core.logging import get_logger

logger = get_logger(__name__)


async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


async def not_found_handler(request: Request, exc: NotFoundError):
    return render(request, "not_found.html", status_code=exc.status_code, message=exc.message)


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", error=str(exc), exc_info=exc)
    return render(
        request,
        "error.html",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Something went wrong. Please try again.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LoginRequired, login_required_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
