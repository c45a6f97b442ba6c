"""
Context resolver — data-scope enforcement.

Runs inside handlers *after* the page gate has allowed the request.

Two rules live here:

- Client scoping.  A `client`-role user bound to a Client only ever sees
  rows whose `client_id` equals theirs.  Every service query over a
  client-bound collection (campaigns, ad accounts, finance projects)
  MUST pass through `apply_client_scope`.  Other roles get no implicit
  filter; their reach is already bounded by the page gate.

- Record ownership.  For per-user records (work reports) a non-admin may
  only touch records they own; `admin` / `super_admin` always pass.  An
  existing record that fails the check is a 403, a missing one a 404.

`resolve_data_scope` re-reads the user row instead of trusting the
Principal, because the client binding may have changed since login.

Usage in a service:
    scope = await resolve_data_scope(principal, db)
    stmt = apply_client_scope(select(Campaign), Campaign, scope)
"""

import uuid
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.errors import Forbidden, Unauthenticated
from backoffice.models.user import ADMIN_ROLES, User, UserRole
from backoffice.rbac.identity import Principal

T = TypeVar("T", bound=Select)


@dataclass(frozen=True)
class DataScope:
    """
    Encapsulates the data-access boundaries for the current request.

    - client_id: set for client users — every client-bound query must filter on this.
    - is_admin: admin / super_admin, used by the ownership rule.
    """

    user_id: uuid.UUID
    role: UserRole
    client_id: uuid.UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_client_scoped(self) -> bool:
        return self.client_id is not None


async def resolve_data_scope(principal: Principal, db: AsyncSession) -> DataScope:
    """Build a DataScope from the caller's current user record."""
    user = await db.get(User, principal.id)
    if user is None:
        raise Unauthenticated("Invalid or expired session")

    if user.role == UserRole.CLIENT and user.client_id is not None:
        return DataScope(user_id=user.id, role=user.role, client_id=user.client_id)

    return DataScope(user_id=user.id, role=user.role)


def apply_client_scope(stmt: T, model: Any, scope: DataScope) -> T:
    """Add `model.client_id == scope.client_id` when the scope requires it."""
    if scope.client_id is None:
        return stmt
    return stmt.where(model.client_id == scope.client_id)


def in_client_scope(row: Any, scope: DataScope) -> bool:
    """Single-row counterpart of `apply_client_scope`."""
    return scope.client_id is None or getattr(row, "client_id", None) == scope.client_id


def scoped_client_id(requested: uuid.UUID | None, scope: DataScope) -> uuid.UUID | None:
    """
    The `client_id` a write may store.

    Client users always write under their own client; naming another
    client is Forbidden.  Other roles keep whatever they asked for.
    """
    if scope.client_id is None:
        return requested
    if requested is not None and requested != scope.client_id:
        raise Forbidden("Cannot assign records to another client")
    return scope.client_id


def is_owner_or_admin(principal: Principal, owner_id: uuid.UUID) -> bool:
    return principal.is_admin or owner_id == principal.id


def ensure_owner_or_admin(principal: Principal, owner_id: uuid.UUID) -> None:
    """Raise Forbidden unless the principal owns the record or is an admin."""
    if not is_owner_or_admin(principal, owner_id):
        raise Forbidden("Access denied")
