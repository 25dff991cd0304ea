"""
Authentication service handling signup and login.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from eventhub.models.user import User
from eventhub.core.exceptions import ValidationError, DuplicateEmailError, InvalidCredentialsError
from eventhub.core.security import hash_password, verify_password
from eventhub.core.metrics import record_signup, record_login
from eventhub.core.logging import get_logger

logger = get_logger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def sign_up(db: AsyncSession, name: str, email: str, password: str) -> User:
    """
    Create an account with a bcrypt-hashed password.
    Raises ValidationError on empty fields, DuplicateEmailError if the
    email (compared case-insensitively) is taken.
    """
    name = (name or "").strip()
    email = normalize_email(email)
    password = password or ""

    if not name or not email or not password:
        record_signup("invalid")
        raise ValidationError("Fill all fields.")

    if await get_user_by_email(db, email):
        logger.warning("signup_failed", reason="email_exists", email=email)
        record_signup("duplicate")
        raise DuplicateEmailError()

    user = User(name=name, email=email, password_hash=await run_in_threadpool(hash_password, password))
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same address
        await db.rollback()
        logger.warning("signup_failed", reason="email_exists_race", email=email)
        record_signup("duplicate")
        raise DuplicateEmailError()
    await db.refresh(user)

    logger.info("user_signed_up", user_id=user.id, email=user.email)
    record_signup("success")
    return user


async def log_in(db: AsyncSession, email: str, password: str) -> User:
    """
    Check credentials. Unknown email and wrong password raise the same
    InvalidCredentialsError.
    """
    user = await get_user_by_email(db, email)

    # bcrypt is CPU-bound; keep it off the event loop
    if not user or not await run_in_threadpool(verify_password, password or "", user.password_hash):
        logger.warning("login_failed", email=normalize_email(email))
        record_login(False)
        raise InvalidCredentialsError()

    logger.info("user_logged_in", user_id=user.id)
    record_login(True)
    return user
