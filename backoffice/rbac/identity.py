"""
Identity resolver — bearer token → Principal.

The Principal is rebuilt from the session store on every request and
carries only `id`, `username` and `role`.  `client_id` is left out on
purpose: role and client binding can change between login and a later
request, so handlers that need ownership scoping re-read the user row
(see `context_resolver.resolve_data_scope`).
"""

import logging
import uuid
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.core.errors import InternalError, Unauthenticated
from backoffice.core.security import bearer_scheme
from backoffice.models.user import ADMIN_ROLES, User, UserRole
from backoffice.services import session_service

logger = logging.getLogger(__name__)

INVALID_SESSION = "Invalid or expired session"


@dataclass(frozen=True)
class Principal:
    id: uuid.UUID
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


async def resolve_principal(token: str | None, db: AsyncSession) -> Principal:
    """
    Turn a raw bearer token into a Principal.

    - missing token                   → Unauthenticated("Unauthorized")
    - unknown / expired session       → Unauthenticated(INVALID_SESSION)
    - session of a deleted user       → Unauthenticated(INVALID_SESSION)
    - session/user store failure      → InternalError("Authentication error")
    """
    if not token:
        raise Unauthenticated("Unauthorized")

    try:
        session = await session_service.get_session_by_token(token, db)
        if session is None:
            raise Unauthenticated(INVALID_SESSION)

        user = await db.get(User, session.user_id)
    except SQLAlchemyError:
        logger.exception("Session lookup failed")
        raise InternalError("Authentication error")

    if user is None:
        raise Unauthenticated(INVALID_SESSION)

    return Principal(id=user.id, username=user.username, role=user.role)


async def get_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    return credentials.credentials if credentials else None


async def get_current_principal(
    token: str | None = Depends(get_current_token),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """FastAPI dependency — authentication only, no page check."""
    return await resolve_principal(token, db)
