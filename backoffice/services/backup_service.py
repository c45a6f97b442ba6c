"""
Backup service — row counts for the super-admin backup screen.

Only reports what a backup would contain; producing the dump itself is
left to the database tooling.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.models import (
    AdAccount,
    Campaign,
    Client,
    FinanceProject,
    Page,
    RolePermission,
    User,
    WorkReport,
)
from backoffice.models.base import utcnow

BACKUP_TABLES = {
    "users": User,
    "clients": Client,
    "campaigns": Campaign,
    "adAccounts": AdAccount,
    "financeProjects": FinanceProject,
    "workReports": WorkReport,
    "pages": Page,
    "rolePermissions": RolePermission,
}


async def get_backup_info(db: AsyncSession) -> dict:
    counts: dict[str, int] = {}
    for name, model in BACKUP_TABLES.items():
        counts[name] = (await db.execute(select(func.count()).select_from(model))).scalar_one()
    return {"generated_at": utcnow(), "counts": counts}
