import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.context_resolver import resolve_data_scope
from backoffice.rbac.dependencies import require_page_permission
from backoffice.rbac.identity import Principal
from backoffice.schemas import AdAccountCreate, AdAccountOut, MessageResponse
from backoffice.services import ad_account_service

router = APIRouter(prefix="/api/ad-accounts", tags=["Ad Accounts"])


@router.get("", response_model=list[AdAccountOut])
async def list_ad_accounts(
    principal: Principal = Depends(require_page_permission("ad_accounts", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    accounts = await ad_account_service.list_ad_accounts(db, scope)
    return [AdAccountOut.model_validate(a) for a in accounts]


@router.get("/{ad_account_id}", response_model=AdAccountOut)
async def get_ad_account(
    ad_account_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("ad_accounts", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    account = await ad_account_service.get_ad_account_by_id(ad_account_id, db, scope)
    return AdAccountOut.model_validate(account)


@router.post("", response_model=AdAccountOut, status_code=201)
async def create_ad_account(
    body: AdAccountCreate,
    principal: Principal = Depends(require_page_permission("ad_accounts", "edit")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    account = await ad_account_service.create_ad_account(body.model_dump(), db, scope)
    return AdAccountOut.model_validate(account)


@router.delete("/{ad_account_id}", response_model=MessageResponse)
async def delete_ad_account(
    ad_account_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("ad_accounts", "delete")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    await ad_account_service.delete_ad_account(ad_account_id, db, scope)
    return MessageResponse(message="Ad account deleted successfully")
