"""
Permission evaluator — `evaluate(principal, page_key, action) -> bool`.

Algorithm:

1. If the call site opted into the super-admin bypass and the principal
   is `super_admin`, allow without touching the store.
2. Otherwise fetch the RolePermission row for (principal.role, page_key).
3. No row, unknown page, or inactive page → deny (fail closed).
4. Return the column for the requested action, read on its own.  Edit
   and delete do not imply view, and view does not gate them.

The evaluator holds no state; two calls with the same inputs and no
intervening write return the same answer.  Store errors propagate to
the caller (the route gate maps them to 500, never to a deny).
"""

import enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.models.page import Page
from backoffice.models.role_permission import RolePermission
from backoffice.models.user import UserRole
from backoffice.rbac.identity import Principal


class PageAction(str, enum.Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"


def permission_column(action: PageAction) -> str:
    """Name of the RolePermission flag governing `action`."""
    match action:
        case PageAction.VIEW:
            return "can_view"
        case PageAction.EDIT:
            return "can_edit"
        case PageAction.DELETE:
            return "can_delete"


def action_allowed(permission: RolePermission, action: PageAction) -> bool:
    match action:
        case PageAction.VIEW:
            return permission.can_view
        case PageAction.EDIT:
            return permission.can_edit
        case PageAction.DELETE:
            return permission.can_delete


async def get_role_permission(
    role: UserRole,
    page_key: str,
    db: AsyncSession,
) -> RolePermission | None:
    """The (role, page) row, provided the page exists and is active."""
    stmt = (
        select(RolePermission)
        .join(Page, Page.id == RolePermission.page_id)
        .where(
            RolePermission.role == role,
            Page.page_key == page_key,
            Page.is_active == True,  # noqa: E712
        )
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def evaluate(
    principal: Principal,
    page_key: str,
    action: PageAction,
    db: AsyncSession,
    *,
    super_admin_bypass: bool = False,
) -> bool:
    if super_admin_bypass and principal.role == UserRole.SUPER_ADMIN:
        return True

    permission = await get_role_permission(principal.role, page_key, db)
    if permission is None:
        return False

    return bool(action_allowed(permission, action))
