"""
Account pages: signup, login and logout.
"""

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.api.deps import RequestContext, get_request_context, set_session_cookie, clear_session_cookie
from eventhub.api.templating import render
from eventhub.db.session import get_db
from eventhub.services.auth_service import sign_up, log_in
from eventhub.services.session_service import create_session, destroy_session
from eventhub.core.exceptions import ValidationError, DuplicateEmailError, InvalidCredentialsError

router = APIRouter(tags=["Authentication"])


async def _start_session(db: AsyncSession, context: RequestContext, user_id: int) -> RedirectResponse:
    token = await create_session(db, user_id, replace=context.session_token)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, token)
    return response


@router.get("/signup")
async def signup_form(request: Request, context: RequestContext = Depends(get_request_context)):
    return render(request, "signup.html", context, error=None, form={})


@router.post("/signup")
async def signup(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Create an account and log it in."""
    try:
        user = await sign_up(db, name, email, password)
    except (ValidationError, DuplicateEmailError) as e:
        return render(
            request,
            "signup.html",
            context,
            status_code=e.status_code,
            error=e.message,
            form={"name": name, "email": email},
        )
    return await _start_session(db, context, user.id)


@router.get("/login")
async def login_form(request: Request, context: RequestContext = Depends(get_request_context)):
    return render(request, "login.html", context, error=None, form={})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await log_in(db, email, password)
    except InvalidCredentialsError as e:
        return render(
            request,
            "login.html",
            context,
            status_code=e.status_code,
            error=e.message,
            form={"email": email},
        )
    return await _start_session(db, context, user.id)


@router.post("/logout")
async def logout(
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    await destroy_session(db, context.session_token)
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response
