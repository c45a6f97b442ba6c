"""
Permission self-check — lets the UI ask whether the caller may perform
an action on a page before rendering it.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.core.errors import InternalError
from backoffice.rbac.evaluator import PageAction, evaluate
from backoffice.rbac.identity import Principal, get_current_principal
from backoffice.schemas import PermissionCheckOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/permissions", tags=["Permissions"])


@router.get("/check/{page_key}", response_model=PermissionCheckOut)
async def check_permission(
    page_key: str,
    action: PageAction = Query(PageAction.VIEW),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    try:
        allowed = await evaluate(principal, page_key, action, db)
    except SQLAlchemyError:
        logger.exception("Permission self-check failed for %s", page_key)
        raise InternalError("Failed to check permission")
    return PermissionCheckOut(has_permission=allowed)
