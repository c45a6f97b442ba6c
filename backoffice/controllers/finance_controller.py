"""
Finance controller — projects.

`finance` page permission for access; client users are further limited
to their own client's projects.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.context_resolver import resolve_data_scope
from backoffice.rbac.dependencies import require_page_permission
from backoffice.rbac.identity import Principal
from backoffice.schemas import FinanceProjectCreate, FinanceProjectOut, MessageResponse
from backoffice.services import finance_service

router = APIRouter(prefix="/api/finance", tags=["Finance"])


@router.get("/projects", response_model=list[FinanceProjectOut])
async def list_projects(
    principal: Principal = Depends(require_page_permission("finance", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    projects = await finance_service.list_projects(db, scope)
    return [FinanceProjectOut.model_validate(p) for p in projects]


@router.get("/projects/{project_id}", response_model=FinanceProjectOut)
async def get_project(
    project_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("finance", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    project = await finance_service.get_project_by_id(project_id, db, scope)
    return FinanceProjectOut.model_validate(project)


@router.post("/projects", response_model=FinanceProjectOut, status_code=201)
async def create_project(
    body: FinanceProjectCreate,
    principal: Principal = Depends(require_page_permission("finance", "edit")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    project = await finance_service.create_project(body.model_dump(), db, scope)
    return FinanceProjectOut.model_validate(project)


@router.delete("/projects/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("finance", "delete")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    await finance_service.delete_project(project_id, db, scope)
    return MessageResponse(message="Project deleted successfully")
