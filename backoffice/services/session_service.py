"""
Session service — the session store.

Handles:
- Creating a session at login (opaque token, only its hash persisted)
- Resolving a bearer token to a live session
- Deleting a session (logout) or every session of a user
- Purging expired rows

Expiry is this store's responsibility: `get_session_by_token` never
returns a session past `expires_at`, and removes such rows as it finds
them.  Callers treat "no session" and "expired session" identically.
"""

import logging
import uuid
from datetime import timedelta

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.config import settings
from backoffice.core.security import generate_session_token, hash_token
from backoffice.models.base import utcnow
from backoffice.models.session import UserSession

logger = logging.getLogger(__name__)


async def create_session(
    user_id: uuid.UUID,
    db: AsyncSession,
    ttl: timedelta | None = None,
) -> tuple[str, UserSession]:
    """Create a session and return ``(raw_token, session)``.

    The raw token is handed to the client once and never stored.
    """
    token = generate_session_token()
    session = UserSession(
        id=uuid.uuid4(),
        user_id=user_id,
        token_hash=hash_token(token),
        expires_at=utcnow() + (ttl or timedelta(hours=settings.SESSION_TTL_HOURS)),
    )
    db.add(session)
    await db.flush()
    logger.info("Created session for user %s", user_id)
    return token, session


async def get_session_by_token(token: str, db: AsyncSession) -> UserSession | None:
    """Return the live session for a raw bearer token, or None."""
    token_hash = hash_token(token)
    now = utcnow()

    stmt = select(UserSession).where(
        UserSession.token_hash == token_hash,
        UserSession.expires_at > now,
    )
    session = (await db.execute(stmt)).scalar_one_or_none()
    if session is not None:
        return session

    # Drop the row if it exists but has lapsed
    result = await db.execute(
        delete(UserSession).where(
            UserSession.token_hash == token_hash,
            UserSession.expires_at <= now,
        )
    )
    if result.rowcount:
        # Committed here: the caller raises 401 next and the request rolls back
        await db.commit()
        logger.debug("Removed expired session")
    return None


async def delete_session(token: str, db: AsyncSession) -> bool:
    """Delete the session for a raw bearer token (logout)."""
    result = await db.execute(
        delete(UserSession).where(UserSession.token_hash == hash_token(token))
    )
    await db.flush()
    return bool(result.rowcount)


async def delete_user_sessions(user_id: uuid.UUID, db: AsyncSession) -> int:
    """
    Delete every session for a given user.

    Returns the number of sessions removed.  Used when a user is
    deactivated or deleted so stale tokens stop resolving immediately.
    """
    result = await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    await db.flush()
    return result.rowcount


async def purge_expired_sessions(db: AsyncSession) -> int:
    result = await db.execute(delete(UserSession).where(UserSession.expires_at <= utcnow()))
    await db.flush()
    if result.rowcount:
        logger.info("Purged %d expired sessions", result.rowcount)
    return result.rowcount
