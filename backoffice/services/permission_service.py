"""
Permission service — administration of pages and role permissions.

Handles:
- Listing pages and role × page rows
- Partial update of a single row
- Bulk update, applied row by row
- Setting one action flag for a (role, page) pair, creating the row
  if it does not exist yet

Writes here only change the store; the evaluator reads it fresh on the
next request, so there is nothing to invalidate.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import NotFound
from backoffice.models.page import Page
from backoffice.models.role_permission import RolePermission
from backoffice.models.user import UserRole
from backoffice.rbac.evaluator import PageAction, permission_column

logger = logging.getLogger(__name__)

_FLAG_FIELDS = ("can_view", "can_edit", "can_delete")


# ── Pages ────────────────────────────────────────────────────────────

async def list_pages(db: AsyncSession) -> list[Page]:
    result = await db.execute(select(Page).order_by(Page.page_key))
    return list(result.scalars().all())


async def get_page_by_key(page_key: str, db: AsyncSession) -> Page | None:
    result = await db.execute(select(Page).where(Page.page_key == page_key))
    return result.scalar_one_or_none()


# ── Role permissions ─────────────────────────────────────────────────

async def list_role_permissions(
    db: AsyncSession,
    role: UserRole | None = None,
) -> list[RolePermission]:
    stmt = select(RolePermission).order_by(RolePermission.role, RolePermission.page_id)
    if role is not None:
        stmt = stmt.where(RolePermission.role == role)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_role_permission(
    permission_id: uuid.UUID,
    db: AsyncSession,
) -> RolePermission | None:
    return await db.get(RolePermission, permission_id)


def _apply_flags(permission: RolePermission, changes: dict) -> None:
    for field in _FLAG_FIELDS:
        value = changes.get(field)
        if value is not None:
            setattr(permission, field, value)


async def update_role_permission(
    permission_id: uuid.UUID,
    changes: dict,
    db: AsyncSession,
) -> RolePermission:
    """Apply the non-null flags in `changes`; 404 if the row is absent."""
    permission = await get_role_permission(permission_id, db)
    if permission is None:
        raise NotFound("Role permission not found")

    _apply_flags(permission, changes)
    await db.flush()
    logger.info(
        "Updated role permission %s (%s): %s",
        permission.id,
        permission.role.value,
        {k: v for k, v in changes.items() if v is not None},
    )
    return permission


async def bulk_update_role_permissions(
    items: list[dict],
    db: AsyncSession,
) -> dict[str, list]:
    """
    Apply each item independently.

    Every row runs in its own savepoint: a failing row is rolled back
    and reported, the rows before and after it still commit with the
    request.  Returns ``{"updated": [...], "failed": [{"id", "reason"}]}``.
    """
    updated: list[RolePermission] = []
    failed: list[dict] = []

    for item in items:
        permission_id = item["id"]
        try:
            async with db.begin_nested():
                permission = await get_role_permission(permission_id, db)
                if permission is None:
                    failed.append({"id": permission_id, "reason": "Role permission not found"})
                    continue
                _apply_flags(permission, item)
                await db.flush()
            updated.append(permission)
        except SQLAlchemyError:
            logger.exception("Bulk update failed for role permission %s", permission_id)
            failed.append({"id": permission_id, "reason": "Update failed"})

    logger.info("Bulk role-permission update: %d updated, %d failed", len(updated), len(failed))
    return {"updated": updated, "failed": failed}


async def set_role_permission(
    role: UserRole,
    page_key: str,
    action: PageAction,
    allowed: bool,
    db: AsyncSession,
) -> RolePermission:
    """Set the single column selected by `action` for (role, page)."""
    page = await get_page_by_key(page_key, db)
    if page is None:
        raise NotFound(f"Page '{page_key}' not found")

    result = await db.execute(
        select(RolePermission).where(
            RolePermission.role == role,
            RolePermission.page_id == page.id,
        )
    )
    permission = result.scalar_one_or_none()
    if permission is None:
        permission = RolePermission(
            id=uuid.uuid4(),
            role=role,
            page_id=page.id,
            can_view=False,
            can_edit=False,
            can_delete=False,
        )
        db.add(permission)

    setattr(permission, permission_column(action), allowed)
    await db.flush()
    logger.info(
        "Set %s=%s for role %s on page %s",
        permission_column(action),
        allowed,
        role.value,
        page_key,
    )
    return permission
