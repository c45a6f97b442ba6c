from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.dependencies import require_super_admin
from backoffice.rbac.identity import Principal
from backoffice.schemas import BackupInfoOut
from backoffice.services import backup_service

router = APIRouter(prefix="/api/backup", tags=["Backup"])


@router.get("/info", response_model=BackupInfoOut)
async def backup_info(
    principal: Principal = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db),
):
    """Row counts per table, for the super-admin backup screen."""
    info = await backup_service.get_backup_info(db)
    return BackupInfoOut(**info)
