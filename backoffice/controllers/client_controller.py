"""
Client controller — client records and client-user logins.

`/api/clients` is a regular page (`clients`) with data scoping: a
client user only ever sees their own Client.  `/api/client-users` is
not a page; it sits behind the admin role floor.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.core.errors import NotFound
from backoffice.models.user import UserRole
from backoffice.rbac.context_resolver import resolve_data_scope
from backoffice.rbac.dependencies import require_admin_or_super_admin, require_page_permission
from backoffice.rbac.identity import Principal
from backoffice.schemas import ClientCreate, ClientOut, ClientUserCreate, MessageResponse, UserOut
from backoffice.services import client_service, user_service

router = APIRouter(prefix="/api", tags=["Clients"])


@router.get("/clients", response_model=list[ClientOut])
async def list_clients(
    principal: Principal = Depends(require_page_permission("clients", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    clients = await client_service.list_clients(db, scope)
    return [ClientOut.model_validate(c) for c in clients]


@router.get("/clients/{client_id}", response_model=ClientOut)
async def get_client(
    client_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("clients", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    client = await client_service.get_client_by_id(client_id, db, scope)
    return ClientOut.model_validate(client)


@router.post("/clients", response_model=ClientOut, status_code=201)
async def create_client(
    body: ClientCreate,
    principal: Principal = Depends(require_page_permission("clients", "edit")),
    db: AsyncSession = Depends(get_db),
):
    client = await client_service.create_client(body.model_dump(), db)
    return ClientOut.model_validate(client)


# ── Client users ─────────────────────────────────────────────────────
@router.get("/client-users", response_model=list[UserOut])
async def list_client_users(
    principal: Principal = Depends(require_admin_or_super_admin),
    db: AsyncSession = Depends(get_db),
):
    users = await user_service.list_client_users(db)
    return [UserOut.model_validate(u) for u in users]


@router.post("/client-users", response_model=UserOut, status_code=201)
async def create_client_user(
    body: ClientUserCreate,
    principal: Principal = Depends(require_admin_or_super_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.create_user(
        username=body.username,
        name=body.name,
        password=body.password,
        role=UserRole.CLIENT,
        client_id=body.client_id,
        db=db,
    )
    return UserOut.model_validate(user)


@router.delete("/client-users/{user_id}", response_model=MessageResponse)
async def delete_client_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(require_admin_or_super_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user_by_id(user_id, db)
    if user.role != UserRole.CLIENT:
        raise NotFound("User not found")
    await user_service.delete_user(user_id, db)
    return MessageResponse(message="User deleted successfully")
