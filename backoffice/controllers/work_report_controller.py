"""
Work-report controller.

Page permission on `work_reports` gates each route; the service then
applies the ownership-or-admin rule per record.  Wiping every report is
an admin-floor operation with no page check.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.dependencies import require_admin_or_super_admin, require_page_permission
from backoffice.rbac.identity import Principal
from backoffice.schemas import (
    DeletedCountResponse,
    MessageResponse,
    WorkReportCreate,
    WorkReportOut,
    WorkReportUpdate,
)
from backoffice.services import work_report_service

router = APIRouter(prefix="/api/work-reports", tags=["Work Reports"])


@router.get("", response_model=list[WorkReportOut])
async def list_work_reports(
    user_id: uuid.UUID | None = Query(None, alias="userId"),
    principal: Principal = Depends(require_page_permission("work_reports", "view")),
    db: AsyncSession = Depends(get_db),
):
    """Admins see every report (optionally for one user); others only their own."""
    reports = await work_report_service.list_work_reports(db, principal, user_id)
    return [WorkReportOut.model_validate(r) for r in reports]


@router.get("/{report_id}", response_model=WorkReportOut)
async def get_work_report(
    report_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("work_reports", "view")),
    db: AsyncSession = Depends(get_db),
):
    report = await work_report_service.get_work_report(report_id, db, principal)
    return WorkReportOut.model_validate(report)


@router.post("", response_model=WorkReportOut, status_code=201)
async def create_work_report(
    body: WorkReportCreate,
    principal: Principal = Depends(require_page_permission("work_reports", "edit")),
    db: AsyncSession = Depends(get_db),
):
    report = await work_report_service.create_work_report(body.model_dump(), db, principal)
    return WorkReportOut.model_validate(report)


@router.put("/{report_id}", response_model=WorkReportOut)
async def update_work_report(
    report_id: uuid.UUID,
    body: WorkReportUpdate,
    principal: Principal = Depends(require_page_permission("work_reports", "edit")),
    db: AsyncSession = Depends(get_db),
):
    report = await work_report_service.update_work_report(
        report_id, body.model_dump(exclude_unset=True), db, principal,
    )
    return WorkReportOut.model_validate(report)


# Registered before `/{report_id}` so "all" is not parsed as an id.
@router.delete("/all", response_model=DeletedCountResponse)
async def delete_all_work_reports(
    principal: Principal = Depends(require_admin_or_super_admin),
    db: AsyncSession = Depends(get_db),
):
    count = await work_report_service.delete_all_work_reports(db, principal)
    return DeletedCountResponse(
        message=f"Successfully deleted {count} work reports",
        deleted_count=count,
    )


@router.delete("/{report_id}", response_model=MessageResponse)
async def delete_work_report(
    report_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("work_reports", "delete")),
    db: AsyncSession = Depends(get_db),
):
    await work_report_service.delete_work_report(report_id, db, principal)
    return MessageResponse(message="Work report deleted successfully")
