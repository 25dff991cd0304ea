"""
Server-side sessions keyed by an opaque cookie token.
"""

from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.models.session import UserSession
from eventhub.models.user import User
from eventhub.schemas.user import CurrentUser
from eventhub.core.security import new_session_token
from eventhub.core.logging import get_logger

logger = get_logger(__name__)


async def create_session(db: AsyncSession, user_id: int, replace: Optional[str] = None) -> str:
    """Issue a new session for `user_id`, dropping the `replace` session if given."""
    if replace:
        await db.execute(delete(UserSession).where(UserSession.id == replace))

    token = new_session_token()
    db.add(UserSession(id=token, user_id=user_id))
    await db.commit()

    logger.info("session_created", user_id=user_id)
    return token


async def resolve_session(db: AsyncSession, token: Optional[str]) -> Optional[CurrentUser]:
    if not token:
        return None

    result = await db.execute(
        select(User).join(UserSession, UserSession.user_id == User.id).where(UserSession.id == token)
    )
    user = result.scalar_one_or_none()
    return CurrentUser.model_validate(user) if user else None


async def destroy_session(db: AsyncSession, token: Optional[str]) -> None:
    if not token:
        return
    await db.execute(delete(UserSession).where(UserSession.id == token))
    await db.commit()
    logger.info("session_destroyed")
