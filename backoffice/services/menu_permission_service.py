"""
Menu-permission service — per-user sidebar visibility flags.

These rows only drive navigation in the UI.  Nothing here is consulted
by the page gate.
"""

import uuid

from pydantic.alias_generators import to_snake
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import InvalidInput, NotFound
from backoffice.models.user import User
from backoffice.models.user_menu_permission import MENU_FLAGS, UserMenuPermission


def normalize_flag(flag: str) -> str:
    """Accept `adminPanel` or `admin_panel`; reject anything else."""
    name = to_snake(flag)
    if name not in MENU_FLAGS:
        raise InvalidInput(f"Unknown menu permission '{flag}'")
    return name


async def list_menu_permissions(
    db: AsyncSession,
    user_id: uuid.UUID | None = None,
) -> list[UserMenuPermission]:
    stmt = select(UserMenuPermission)
    if user_id is not None:
        stmt = stmt.where(UserMenuPermission.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_menu_permission(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> UserMenuPermission | None:
    result = await db.execute(
        select(UserMenuPermission).where(UserMenuPermission.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_menu_permission(
    user_id: uuid.UUID,
    flags: dict[str, bool],
    db: AsyncSession,
) -> UserMenuPermission:
    if await db.get(User, user_id) is None:
        raise NotFound("User not found")
    if await get_menu_permission(user_id, db) is not None:
        raise InvalidInput("Menu permissions already exist for this user")

    row = UserMenuPermission(
        id=uuid.uuid4(),
        user_id=user_id,
        **{name: bool(flags.get(name, False)) for name in MENU_FLAGS},
    )
    db.add(row)
    await db.flush()
    return row


async def update_menu_permission(
    user_id: uuid.UUID,
    changes: dict[str, bool | None],
    db: AsyncSession,
) -> UserMenuPermission:
    row = await get_menu_permission(user_id, db)
    if row is None:
        raise NotFound("Menu permissions not found")

    for name in MENU_FLAGS:
        value = changes.get(name)
        if value is not None:
            setattr(row, name, value)
    await db.flush()
    return row


async def set_menu_flag(
    user_id: uuid.UUID,
    flag: str,
    enabled: bool,
    db: AsyncSession,
) -> UserMenuPermission:
    """Set one flag, creating the user's row on first use."""
    name = normalize_flag(flag)
    row = await get_menu_permission(user_id, db)
    if row is None:
        row = await create_menu_permission(user_id, {name: enabled}, db)
    else:
        setattr(row, name, enabled)
        await db.flush()
    return row


async def delete_menu_permission(user_id: uuid.UUID, db: AsyncSession) -> None:
    row = await get_menu_permission(user_id, db)
    if row is None:
        raise NotFound("Menu permissions not found")
    await db.delete(row)
    await db.flush()
