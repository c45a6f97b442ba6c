import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import InvalidInput, NotFound
from backoffice.models.client import Client
from backoffice.rbac.context_resolver import DataScope


async def list_clients(db: AsyncSession, scope: DataScope) -> list[Client]:
    stmt = select(Client).order_by(Client.name)
    if scope.client_id is not None:
        stmt = stmt.where(Client.id == scope.client_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_client_by_id(
    client_id: uuid.UUID,
    db: AsyncSession,
    scope: DataScope,
) -> Client:
    client = await db.get(Client, client_id)
    if client is None or (scope.client_id is not None and client.id != scope.client_id):
        raise NotFound("Client not found")
    return client


async def create_client(data: dict, db: AsyncSession) -> Client:
    client = Client(id=uuid.uuid4(), is_active=True, **data)
    db.add(client)
    await db.flush()
    return client


async def check_client_exists(client_id: uuid.UUID | None, db: AsyncSession) -> None:
    """Reject a write that names a client which does not exist."""
    if client_id is not None and await db.get(Client, client_id) is None:
        raise InvalidInput("Client not found")
