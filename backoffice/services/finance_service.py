import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import NotFound
from backoffice.models.finance_project import FinanceProject
from backoffice.rbac.context_resolver import (
    DataScope,
    apply_client_scope,
    in_client_scope,
    scoped_client_id,
)
from backoffice.services import client_service


async def list_projects(db: AsyncSession, scope: DataScope) -> list[FinanceProject]:
    stmt = apply_client_scope(select(FinanceProject), FinanceProject, scope)
    result = await db.execute(stmt.order_by(FinanceProject.created_at.desc()))
    return list(result.scalars().all())


async def get_project_by_id(
    project_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> FinanceProject:
    project = await db.get(FinanceProject, project_id)
    if project is None or not in_client_scope(project, scope):
        raise NotFound("Project not found")
    return project


async def create_project(data: dict, db: AsyncSession, scope: DataScope) -> FinanceProject:
    data["client_id"] = scoped_client_id(data["client_id"], scope)
    await client_service.check_client_exists(data["client_id"], db)
    project = FinanceProject(id=uuid.uuid4(), **data)
    db.add(project)
    await db.flush()
    return project


async def delete_project(
    project_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> None:
    project = await get_project_by_id(project_id, db, scope)
    await db.delete(project)
    await db.flush()
