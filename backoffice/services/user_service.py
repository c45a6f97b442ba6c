"""
User service — CRUD & query helpers.

Role changes take effect on the caller's next request: the Principal is
rebuilt from the user row each time, so nothing has to be revoked.
Deactivating or deleting a user drops their sessions so existing tokens
stop resolving immediately.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import InvalidInput, NotFound
from backoffice.core.security import hash_password
from backoffice.models.user import User, UserRole
from backoffice.models.user_menu_permission import UserMenuPermission
from backoffice.services import client_service, session_service

logger = logging.getLogger(__name__)


async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def get_user_by_username(username: str, db: AsyncSession) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def list_users(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 50,
    role: UserRole | None = None,
) -> list[User]:
    stmt = select(User).order_by(User.created_at)
    if role is not None:
        stmt = stmt.where(User.role == role)
    result = await db.execute(stmt.offset(skip).limit(limit))
    return list(result.scalars().all())


async def list_client_users(db: AsyncSession) -> list[User]:
    return await list_users(db, limit=1000, role=UserRole.CLIENT)


async def create_user(
    *,
    username: str,
    name: str,
    password: str,
    role: UserRole,
    db: AsyncSession,
    client_id: uuid.UUID | None = None,
) -> User:
    """Create a user together with its (dashboard-only) menu row."""
    if await get_user_by_username(username, db) is not None:
        raise InvalidInput("Username already exists")
    if role == UserRole.CLIENT and client_id is None:
        raise InvalidInput("clientId is required for client users")
    await client_service.check_client_exists(client_id, db)

    user = User(
        id=uuid.uuid4(),
        username=username,
        name=name,
        password_hash=hash_password(password),
        role=role,
        client_id=client_id if role == UserRole.CLIENT else None,
        is_active=True,
    )
    user.menu_permission = UserMenuPermission(id=uuid.uuid4(), dashboard=True)
    db.add(user)
    await db.flush()
    logger.info("Created user %s (%s)", user.username, role.value)
    return user


async def update_user(
    user_id: uuid.UUID,
    changes: dict,
    db: AsyncSession,
) -> User:
    user = await get_user_by_id(user_id, db)

    username = changes.get("username")
    if username is not None and username != user.username:
        if await get_user_by_username(username, db) is not None:
            raise InvalidInput("Username already exists")
        user.username = username

    if changes.get("name") is not None:
        user.name = changes["name"]
    if changes.get("password"):
        user.password_hash = hash_password(changes["password"])
    if changes.get("role") is not None:
        user.role = changes["role"]
    if "client_id" in changes:
        await client_service.check_client_exists(changes["client_id"], db)
        user.client_id = changes["client_id"]
    if user.role == UserRole.CLIENT and user.client_id is None:
        raise InvalidInput("clientId is required for client users")

    if changes.get("is_active") is False and user.is_active:
        user.is_active = False
        await session_service.delete_user_sessions(user.id, db)
    elif changes.get("is_active") is True:
        user.is_active = True

    await db.flush()
    logger.info("Updated user %s", user.username)
    return user


async def delete_user(user_id: uuid.UUID, db: AsyncSession) -> None:
    user = await get_user_by_id(user_id, db)
    await session_service.delete_user_sessions(user.id, db)
    await db.delete(user)
    await db.flush()
    logger.info("Deleted user %s", user.username)
