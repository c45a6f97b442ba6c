"""
Work-report service.

Reports belong to the user who filed them.  Rules:
- Non-admins list only their own reports; admins list everyone's.
- Reading, editing or deleting another user's report needs an admin
  role (403 otherwise).  A missing report is a 404.
- Only admins may file a report for, or move a report to, another user.
"""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import Forbidden, NotFound
from backoffice.models.work_report import WorkReport
from backoffice.rbac.context_resolver import ensure_owner_or_admin
from backoffice.rbac.identity import Principal

logger = logging.getLogger(__name__)


async def list_work_reports(
    db: AsyncSession,
    principal: Principal,
    user_id: uuid.UUID | None = None,
) -> list[WorkReport]:
    stmt = select(WorkReport).order_by(WorkReport.date.desc())
    if not principal.is_admin:
        stmt = stmt.where(WorkReport.user_id == principal.id)
    elif user_id is not None:
        stmt = stmt.where(WorkReport.user_id == user_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_work_report(
    report_id: uuid.UUID,
    db: AsyncSession,
    principal: Principal,
) -> WorkReport:
    report = await db.get(WorkReport, report_id)
    if report is None:
        raise NotFound("Work report not found")
    ensure_owner_or_admin(principal, report.user_id)
    return report


async def create_work_report(
    data: dict,
    db: AsyncSession,
    principal: Principal,
) -> WorkReport:
    owner_id = data.pop("user_id", None) or principal.id
    if owner_id != principal.id and not principal.is_admin:
        raise Forbidden("Cannot create work reports for other users")

    report = WorkReport(id=uuid.uuid4(), user_id=owner_id, **data)
    db.add(report)
    await db.flush()
    return report


async def update_work_report(
    report_id: uuid.UUID,
    changes: dict,
    db: AsyncSession,
    principal: Principal,
) -> WorkReport:
    report = await get_work_report(report_id, db, principal)

    new_owner = changes.pop("user_id", None)
    if new_owner is not None and new_owner != report.user_id:
        if not principal.is_admin:
            raise Forbidden("Cannot change work report owner")
        report.user_id = new_owner

    for field, value in changes.items():
        if value is not None:
            setattr(report, field, value)
    await db.flush()
    return report


async def delete_work_report(
    report_id: uuid.UUID,
    db: AsyncSession,
    principal: Principal,
) -> None:
    report = await get_work_report(report_id, db, principal)
    await db.delete(report)
    await db.flush()


async def delete_all_work_reports(db: AsyncSession, principal: Principal) -> int:
    result = await db.execute(delete(WorkReport))
    await db.flush()
    logger.warning("User %s deleted all %d work reports", principal.id, result.rowcount)
    return result.rowcount
