"""
RBAC dependencies — the route gates.

`require_page_permission` is a *dependency factory*: call it with a page
key and an action and it returns a FastAPI dependency that will:

1. Resolve the Principal (via `get_current_principal`).
2. Ask the evaluator whether the principal's role may perform the
   action on the page.
3. Return 403 on a deny, naming the missing action.
4. Return 500 if the permission store fails — a store error is never
   reported as a deny.

Because it runs as a dependency, a failed gate stops the request before
the handler body executes.

Usage in a route:
    @router.get("/campaigns", dependencies=[Depends(require_page_permission("campaigns", "view"))])
    async def list_campaigns(...): ...

Or inject the principal:
    @router.delete("/campaigns/{id}")
    async def delete_campaign(
        principal: Principal = Depends(require_page_permission("campaigns", "delete")),
    ): ...

Routes that are not modelled as pages use the coarser role-floor gates
(`require_super_admin`, `require_admin_or_super_admin`), which compare
the principal's role against a fixed set and never read the page tables.
"""

import logging

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.database import get_db
from backoffice.core.errors import Forbidden, InternalError
from backoffice.models.user import UserRole
from backoffice.rbac.evaluator import PageAction, evaluate
from backoffice.rbac.identity import Principal, get_current_principal

logger = logging.getLogger("rbac")

# Page keys referenced by any gate; checked against the store at startup.
declared_page_keys: set[str] = set()


class require_page_permission:
    """
    Dependency factory.

    Can be used as:
        Depends(require_page_permission("finance", "view"))
        Depends(require_page_permission("admin", "edit", super_admin_bypass=True))

    `super_admin_bypass` is opt-in per call site: it keeps permission
    administration reachable for `super_admin` even when the page rows
    are missing or broken.
    """

    def __init__(
        self,
        page_key: str,
        action: PageAction | str = PageAction.VIEW,
        *,
        super_admin_bypass: bool = False,
    ):
        self.page_key = page_key
        self.action = PageAction(action)
        self.super_admin_bypass = super_admin_bypass
        declared_page_keys.add(page_key)

    async def __call__(
        self,
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ) -> Principal:
        try:
            allowed = await evaluate(
                principal,
                self.page_key,
                self.action,
                db,
                super_admin_bypass=self.super_admin_bypass,
            )
        except SQLAlchemyError:
            logger.exception(
                "Permission check failed for user %s on %s:%s",
                principal.id,
                self.page_key,
                self.action.value,
            )
            raise InternalError("Permission check failed")

        if not allowed:
            logger.warning(
                "Permission denied for user %s (%s) — page=%s action=%s",
                principal.id,
                principal.role.value,
                self.page_key,
                self.action.value,
            )
            raise Forbidden(
                f"Access denied. You don't have {self.action.value} permission for this page."
            )

        return principal

    def __repr__(self) -> str:
        return f"require_page_permission({self.page_key!r}, {self.action.value!r})"


# ── Role-floor gates ─────────────────────────────────────────────────


class require_role:
    """
    Role-floor gate: passes when the principal's role is in a fixed set.

    No page lookup is made, so these gates suit endpoints that have no
    Page row (backups, client-user administration, ...).
    """

    def __init__(self, *roles: UserRole, message: str = "Access denied"):
        self.allowed_roles = frozenset(roles)
        self.message = message

    async def __call__(
        self,
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if principal.role not in self.allowed_roles:
            logger.warning(
                "Role floor denied user %s (%s) — allowed: %s",
                principal.id,
                principal.role.value,
                sorted(r.value for r in self.allowed_roles),
            )
            raise Forbidden(self.message)
        return principal


require_super_admin = require_role(
    UserRole.SUPER_ADMIN,
    message="Super Admin access required",
)

require_admin_or_super_admin = require_role(
    UserRole.ADMIN,
    UserRole.SUPER_ADMIN,
    message="Admin access required",
)
