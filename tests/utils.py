"""Test helpers for building users, sessions and permission rows."""

import uuid
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.security import hash_password
from backoffice.models import Client, Page, RolePermission, User, UserMenuPermission, UserRole
from backoffice.rbac.identity import Principal
from backoffice.services import session_service

DEFAULT_PASSWORD = "Passw0rd!"


async def create_client(db: AsyncSession, name: str = "Acme") -> Client:
    client = Client(id=uuid.uuid4(), name=name, is_active=True)
    db.add(client)
    await db.commit()
    return client


async def create_user(
    db: AsyncSession,
    username: str,
    role: UserRole,
    *,
    password: str = DEFAULT_PASSWORD,
    client_id: uuid.UUID | None = None,
    is_active: bool = True,
) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        name=username.title(),
        password_hash=hash_password(password),
        role=role,
        client_id=client_id,
        is_active=is_active,
    )
    user.menu_permission = UserMenuPermission(id=uuid.uuid4(), dashboard=True)
    db.add(user)
    await db.commit()
    return user


async def login(db: AsyncSession, user: User, ttl: timedelta | None = None) -> dict[str, str]:
    """Open a session for `user` and return its Authorization header."""
    token, _ = await session_service.create_session(user.id, db, ttl=ttl)
    await db.commit()
    return bearer(token)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, username=user.username, role=user.role)


async def get_page(db: AsyncSession, page_key: str) -> Page:
    return (await db.execute(select(Page).where(Page.page_key == page_key))).scalar_one()


async def get_permission_row(
    db: AsyncSession,
    role: UserRole,
    page_key: str,
) -> RolePermission | None:
    stmt = (
        select(RolePermission)
        .join(Page, Page.id == RolePermission.page_id)
        .where(RolePermission.role == role, Page.page_key == page_key)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def set_flags(
    db: AsyncSession,
    role: UserRole,
    page_key: str,
    *,
    can_view: bool = False,
    can_edit: bool = False,
    can_delete: bool = False,
) -> RolePermission:
    """Upsert the (role, page) row with exactly these flags."""
    row = await get_permission_row(db, role, page_key)
    if row is None:
        page = await get_page(db, page_key)
        row = RolePermission(id=uuid.uuid4(), role=role, page_id=page.id)
        db.add(row)
    row.can_view = can_view
    row.can_edit = can_edit
    row.can_delete = can_delete
    await db.commit()
    return row


async def remove_row(db: AsyncSession, role: UserRole, page_key: str) -> None:
    row = await get_permission_row(db, role, page_key)
    if row is not None:
        await db.delete(row)
        await db.commit()
