"""
Campaign service.

All queries go through the caller's DataScope:
- Client users see only their own client's campaigns.
- Every other role sees all campaigns; the page gate bounds their reach.

A campaign outside the caller's scope is reported as not found.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import NotFound
from backoffice.models.campaign import Campaign
from backoffice.rbac.context_resolver import (
    DataScope,
    apply_client_scope,
    in_client_scope,
    scoped_client_id,
)
from backoffice.services import client_service


async def list_campaigns(
    db: AsyncSession,
    scope: DataScope,
    skip: int = 0,
    limit: int = 50,
) -> list[Campaign]:
    stmt = apply_client_scope(select(Campaign), Campaign, scope)
    stmt = stmt.order_by(Campaign.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_campaign_by_id(
    campaign_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> Campaign:
    campaign = await db.get(Campaign, campaign_id)
    if campaign is None or not in_client_scope(campaign, scope):
        raise NotFound("Campaign not found")
    return campaign


async def create_campaign(data: dict, db: AsyncSession, scope: DataScope) -> Campaign:
    data["client_id"] = scoped_client_id(data.get("client_id"), scope)
    await client_service.check_client_exists(data["client_id"], db)
    campaign = Campaign(id=uuid.uuid4(), **data)
    db.add(campaign)
    await db.flush()
    return campaign


async def update_campaign(
    campaign_id: uuid.UUID,
    changes: dict,
    db: AsyncSession,
    scope: DataScope,
) -> Campaign:
    campaign = await get_campaign_by_id(campaign_id, db, scope)
    if "client_id" in changes:
        changes["client_id"] = scoped_client_id(changes["client_id"], scope)
        await client_service.check_client_exists(changes["client_id"], db)
    for field, value in changes.items():
        setattr(campaign, field, value)
    await db.flush()
    return campaign


async def delete_campaign(
    campaign_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> None:
    campaign = await get_campaign_by_id(campaign_id, db, scope)
    await db.delete(campaign)
    await db.flush()
