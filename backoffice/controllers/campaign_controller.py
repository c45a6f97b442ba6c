"""
Campaign controller.

Every route enforces:
1. Page permission on `campaigns` (via `require_page_permission`)
2. Data scope (via `resolve_data_scope` — client users see only their
   own client's campaigns)
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.rbac.context_resolver import resolve_data_scope
from backoffice.rbac.dependencies import require_page_permission
from backoffice.rbac.identity import Principal
from backoffice.schemas import CampaignCreate, CampaignOut, CampaignUpdate, MessageResponse
from backoffice.services import campaign_service

router = APIRouter(prefix="/api/campaigns", tags=["Campaigns"])


@router.get("", response_model=list[CampaignOut])
async def list_campaigns(
    principal: Principal = Depends(require_page_permission("campaigns", "view")),
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    scope = await resolve_data_scope(principal, db)
    campaigns = await campaign_service.list_campaigns(db, scope, skip, limit)
    return [CampaignOut.model_validate(c) for c in campaigns]


@router.get("/{campaign_id}", response_model=CampaignOut)
async def get_campaign(
    campaign_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("campaigns", "view")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    campaign = await campaign_service.get_campaign_by_id(campaign_id, db, scope)
    return CampaignOut.model_validate(campaign)


@router.post("", response_model=CampaignOut, status_code=201)
async def create_campaign(
    body: CampaignCreate,
    principal: Principal = Depends(require_page_permission("campaigns", "edit")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    campaign = await campaign_service.create_campaign(body.model_dump(), db, scope)
    return CampaignOut.model_validate(campaign)


@router.put("/{campaign_id}", response_model=CampaignOut)
async def update_campaign(
    campaign_id: uuid.UUID,
    body: CampaignUpdate,
    principal: Principal = Depends(require_page_permission("campaigns", "edit")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    campaign = await campaign_service.update_campaign(
        campaign_id, body.model_dump(exclude_unset=True), db, scope,
    )
    return CampaignOut.model_validate(campaign)


@router.delete("/{campaign_id}", response_model=MessageResponse)
async def delete_campaign(
    campaign_id: uuid.UUID,
    principal: Principal = Depends(require_page_permission("campaigns", "delete")),
    db: AsyncSession = Depends(get_db),
):
    scope = await resolve_data_scope(principal, db)
    await campaign_service.delete_campaign(campaign_id, db, scope)
    return MessageResponse(message="Campaign deleted successfully")
