"""
Admin controller — pages, role permissions, users, menu permissions.

Every route sits behind the `admin` page gate with the super-admin
bypass turned on, so a `super_admin` can always repair the permission
table even if its own `admin` row is missing or wrong.
Controllers are THIN — they delegate to services and return schemas.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.core.errors import NotFound
from backoffice.models.user import UserRole
from backoffice.rbac.dependencies import require_page_permission
from backoffice.rbac.evaluator import PageAction
from backoffice.rbac.identity import Principal
from backoffice.schemas import (
    BulkUpdateFailure,
    BulkUpdateResult,
    MenuFlagsUpdate,
    MenuFlagToggle,
    MenuPermissionCreate,
    MenuPermissionOut,
    MessageResponse,
    PageOut,
    PermissionGrantRequest,
    RolePermissionBulkItem,
    RolePermissionOut,
    RolePermissionUpdate,
    UserCreate,
    UserOut,
    UserUpdate,
)
from backoffice.services import menu_permission_service, permission_service, user_service

router = APIRouter(prefix="/api", tags=["Admin"])

admin_view = require_page_permission("admin", PageAction.VIEW, super_admin_bypass=True)
admin_edit = require_page_permission("admin", PageAction.EDIT, super_admin_bypass=True)
admin_delete = require_page_permission("admin", PageAction.DELETE, super_admin_bypass=True)


# ── Pages ────────────────────────────────────────────────────────────
@router.get("/pages", response_model=list[PageOut])
async def list_pages(
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
):
    pages = await permission_service.list_pages(db)
    return [PageOut.model_validate(p) for p in pages]


# ── Role permissions ─────────────────────────────────────────────────
@router.get("/role-permissions", response_model=list[RolePermissionOut])
async def list_role_permissions(
    role: UserRole | None = Query(None),
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
):
    rows = await permission_service.list_role_permissions(db, role)
    return [RolePermissionOut.model_validate(r) for r in rows]


@router.get("/role-permissions/{role}", response_model=list[RolePermissionOut])
async def list_permissions_for_role(
    role: UserRole,
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
):
    rows = await permission_service.list_role_permissions(db, role)
    return [RolePermissionOut.model_validate(r) for r in rows]


# Registered before `/{permission_id}` so "bulk" is not parsed as an id.
@router.put("/role-permissions/bulk", response_model=BulkUpdateResult)
async def bulk_update_role_permissions(
    body: list[RolePermissionBulkItem],
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    """
    Update many rows at once.  Each row is applied on its own; the
    response lists the rows that changed and the ones that did not.
    """
    result = await permission_service.bulk_update_role_permissions(
        [item.model_dump() for item in body], db,
    )
    return BulkUpdateResult(
        updated=[RolePermissionOut.model_validate(r) for r in result["updated"]],
        failed=[BulkUpdateFailure(**f) for f in result["failed"]],
    )


@router.post("/role-permissions/grant", response_model=RolePermissionOut)
async def grant_role_permission(
    body: PermissionGrantRequest,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    row = await permission_service.set_role_permission(
        body.role, body.page_key, body.action, body.allowed, db,
    )
    return RolePermissionOut.model_validate(row)


@router.put("/role-permissions/{permission_id}", response_model=RolePermissionOut)
async def update_role_permission(
    permission_id: uuid.UUID,
    body: RolePermissionUpdate,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    row = await permission_service.update_role_permission(
        permission_id, body.model_dump(exclude_unset=True), db,
    )
    return RolePermissionOut.model_validate(row)


# ── Users ────────────────────────────────────────────────────────────
@router.get("/users", response_model=list[UserOut])
async def list_users(
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    users = await user_service.list_users(db, skip, limit)
    return [UserOut.model_validate(u) for u in users]


@router.post("/users", response_model=UserOut, status_code=201)
async def create_user(
    body: UserCreate,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.create_user(
        username=body.username,
        name=body.name,
        password=body.password,
        role=body.role,
        client_id=body.client_id,
        db=db,
    )
    return UserOut.model_validate(user)


@router.put("/users/{user_id}", response_model=UserOut)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_user(user_id, body.model_dump(exclude_unset=True), db)
    return UserOut.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(admin_delete),
    db: AsyncSession = Depends(get_db),
):
    await user_service.delete_user(user_id, db)
    return MessageResponse(message="User deleted successfully")


# ── User menu permissions ────────────────────────────────────────────
@router.get("/user-menu-permissions", response_model=list[MenuPermissionOut])
async def list_menu_permissions(
    user_id: uuid.UUID | None = Query(None, alias="userId"),
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
):
    rows = await menu_permission_service.list_menu_permissions(db, user_id)
    return [MenuPermissionOut.model_validate(r) for r in rows]


@router.get("/user-menu-permissions/{user_id}", response_model=MenuPermissionOut)
async def get_menu_permission(
    user_id: uuid.UUID,
    principal: Principal = Depends(admin_view),
    db: AsyncSession = Depends(get_db),
):
    row = await menu_permission_service.get_menu_permission(user_id, db)
    if row is None:
        raise NotFound("Menu permissions not found")
    return MenuPermissionOut.model_validate(row)


@router.post("/user-menu-permissions", response_model=MenuPermissionOut, status_code=201)
async def create_menu_permission(
    body: MenuPermissionCreate,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    flags = body.model_dump(exclude={"user_id"})
    row = await menu_permission_service.create_menu_permission(body.user_id, flags, db)
    return MenuPermissionOut.model_validate(row)


@router.put("/user-menu-permissions/{user_id}", response_model=MenuPermissionOut)
async def update_menu_permission(
    user_id: uuid.UUID,
    body: MenuFlagsUpdate,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    row = await menu_permission_service.update_menu_permission(
        user_id, body.model_dump(exclude_unset=True), db,
    )
    return MenuPermissionOut.model_validate(row)


@router.patch("/user-menu-permissions/{user_id}/{flag}", response_model=MenuPermissionOut)
async def set_menu_flag(
    user_id: uuid.UUID,
    flag: str,
    body: MenuFlagToggle,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    row = await menu_permission_service.set_menu_flag(user_id, flag, body.enabled, db)
    return MenuPermissionOut.model_validate(row)


@router.delete("/user-menu-permissions/{user_id}", response_model=MessageResponse)
async def delete_menu_permission(
    user_id: uuid.UUID,
    principal: Principal = Depends(admin_edit),
    db: AsyncSession = Depends(get_db),
):
    await menu_permission_service.delete_menu_permission(user_id, db)
    return MessageResponse(message="Menu permissions deleted successfully")
