"""Ad-account service — client-scoped like campaigns."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import NotFound
from backoffice.models.ad_account import AdAccount
from backoffice.rbac.context_resolver import (
    DataScope,
    apply_client_scope,
    in_client_scope,
    scoped_client_id,
)
from backoffice.services import client_service


async def list_ad_accounts(db: AsyncSession, scope: DataScope) -> list[AdAccount]:
    stmt = apply_client_scope(select(AdAccount), AdAccount, scope)
    result = await db.execute(stmt.order_by(AdAccount.created_at.desc()))
    return list(result.scalars().all())


async def get_ad_account_by_id(
    ad_account_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> AdAccount:
    account = await db.get(AdAccount, ad_account_id)
    if account is None or not in_client_scope(account, scope):
        raise NotFound("Ad account not found")
    return account


async def create_ad_account(data: dict, db: AsyncSession, scope: DataScope) -> AdAccount:
    data["client_id"] = scoped_client_id(data.get("client_id"), scope)
    await client_service.check_client_exists(data["client_id"], db)
    account = AdAccount(id=uuid.uuid4(), **data)
    db.add(account)
    await db.flush()
    return account


async def delete_ad_account(
    ad_account_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> None:
    account = await get_ad_account_by_id(ad_account_id, db, scope)
    await db.delete(account)
    await db.flush()
