"""
Authentication service.

Handles:
- Login with username & password → new opaque session token
- Logout (deletes the caller's session)

Every login opens a fresh session; concurrent sessions are allowed.
All business logic lives here — controllers call service methods
and return the result.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import Forbidden, Unauthenticated
from backoffice.core.security import verify_password
from backoffice.services import session_service, user_service

logger = logging.getLogger(__name__)


async def authenticate_user(username: str, password: str, db: AsyncSession) -> dict:
    """Validate credentials and return the user, a token and its expiry."""
    user = await user_service.get_user_by_username(username, db)

    if user is None or not verify_password(password, user.password_hash or ""):
        logger.info("Failed login for %r", username)
        raise Unauthenticated("Invalid username or password")

    if not user.is_active:
        raise Forbidden("Account is disabled")

    token, session = await session_service.create_session(user.id, db)
    logger.info("User %s logged in", user.username)
    return {"user": user, "token": token, "expires_at": session.expires_at}


async def logout(token: str, db: AsyncSession) -> None:
    await session_service.delete_session(token, db)
