"""
Page & role-permission seeding script.

Run this once against a live database to populate the default pages
and the role × page permission matrix.  It is IDEMPOTENT — safe to
re-run: existing pages and existing (role, page) rows are left alone,
so administrator edits survive restarts.

Governance rules encoded in the matrix:
    • Only SUPER_ADMIN holds the `admin` page (permission administration)
    • ADMIN can delete operational data but not salary records
    • CLIENT only ever views, and only client-scoped pages

Usage:
    python -m backoffice.rbac.permission_seed
"""

import asyncio
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backoffice.core.config import settings
from backoffice.models import Base  # registers every table for create_all
from backoffice.models.page import Page
from backoffice.models.role_permission import RolePermission
from backoffice.models.user import UserRole

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────
# 1.  CANONICAL PAGE LIST
# ────────────────────────────────────────────────────────────────────
PAGES: list[dict[str, str]] = [
    {"page_key": "dashboard", "display_name": "Dashboard", "path": "/",
     "description": "Main dashboard with metrics and overview"},
    {"page_key": "campaigns", "display_name": "Campaign Management", "path": "/campaigns",
     "description": "Manage advertising campaigns"},
    {"page_key": "campaign_details", "display_name": "Campaign Details", "path": "/campaigns/:id",
     "description": "View and edit individual campaign details"},
    {"page_key": "clients", "display_name": "Client Management", "path": "/clients",
     "description": "Manage client accounts and information"},
    {"page_key": "ad_accounts", "display_name": "Ad Accounts", "path": "/ad-accounts",
     "description": "Manage advertising account connections"},
    {"page_key": "finance", "display_name": "Finance", "path": "/finance",
     "description": "Projects, payments and expenses"},
    {"page_key": "salary_management", "display_name": "Salary Management", "path": "/salaries",
     "description": "Manage employee salaries and payments"},
    {"page_key": "work_reports", "display_name": "Work Reports", "path": "/work-reports",
     "description": "Track and submit work hours and tasks"},
    {"page_key": "client_mailbox", "display_name": "Client Mailbox", "path": "/client-mailbox",
     "description": "Send manual emails to clients with custom reports"},
    {"page_key": "admin", "display_name": "Admin Panel", "path": "/admin",
     "description": "Administrative settings and user management"},
]

# ────────────────────────────────────────────────────────────────────
# 2.  ROLE → PAGE → (view, edit, delete)
#
#     Pages missing from a role's map get no row at all, which the
#     evaluator treats as deny.
# ────────────────────────────────────────────────────────────────────
_NONE = (False, False, False)
_VIEW = (True, False, False)
_VIEW_EDIT = (True, True, False)
_ALL = (True, True, True)

ROLE_PERMISSIONS: dict[UserRole, dict[str, tuple[bool, bool, bool]]] = {
    UserRole.USER: {
        "dashboard": _VIEW,
        "campaigns": _NONE,
        "campaign_details": _NONE,
        "clients": _NONE,
        "ad_accounts": _NONE,
        "finance": _NONE,
        "salary_management": _NONE,
        "work_reports": _VIEW_EDIT,
        "client_mailbox": _NONE,
        "admin": _NONE,
    },
    UserRole.MANAGER: {
        "dashboard": _VIEW,
        "campaigns": _VIEW,
        "campaign_details": _VIEW,
        "clients": _VIEW,
        "ad_accounts": _VIEW,
        "finance": _NONE,
        "salary_management": _NONE,
        "work_reports": _VIEW_EDIT,
        "client_mailbox": _VIEW_EDIT,
        "admin": _NONE,
    },
    UserRole.ADMIN: {
        "dashboard": _VIEW_EDIT,
        "campaigns": _ALL,
        "campaign_details": _VIEW_EDIT,
        "clients": _ALL,
        "ad_accounts": _ALL,
        "finance": _ALL,
        "salary_management": _VIEW_EDIT,
        "work_reports": _ALL,
        "client_mailbox": _VIEW_EDIT,
        "admin": _NONE,
    },
    UserRole.SUPER_ADMIN: {page["page_key"]: _ALL for page in PAGES},
    UserRole.CLIENT: {
        "dashboard": _VIEW,
        "campaigns": _VIEW,
        "ad_accounts": _VIEW,
        "finance": _VIEW,
    },
}


# ────────────────────────────────────────────────────────────────────
# 3.  SEED FUNCTION (idempotent)
# ────────────────────────────────────────────────────────────────────
async def seed(session: AsyncSession) -> None:
    """Create default pages & role permissions if they don't already exist."""

    # ── Pages ────────────────────────────────────────────────────────
    existing_pages = (await session.execute(select(Page))).scalars().all()
    key_to_page: dict[str, Page] = {p.page_key: p for p in existing_pages}

    pages_created = 0
    for pdata in PAGES:
        if pdata["page_key"] not in key_to_page:
            page = Page(id=uuid.uuid4(), is_active=True, **pdata)
            session.add(page)
            key_to_page[pdata["page_key"]] = page
            pages_created += 1

    await session.flush()  # ensure IDs are available

    # ── Role permissions ─────────────────────────────────────────────
    existing_rows = (
        await session.execute(select(RolePermission.role, RolePermission.page_id))
    ).all()
    existing_pairs = {(role, page_id) for role, page_id in existing_rows}

    rows_created = 0
    for role, matrix in ROLE_PERMISSIONS.items():
        for page_key, (can_view, can_edit, can_delete) in matrix.items():
            page = key_to_page.get(page_key)
            if page is None or (role, page.id) in existing_pairs:
                continue
            session.add(
                RolePermission(
                    id=uuid.uuid4(),
                    role=role,
                    page_id=page.id,
                    can_view=can_view,
                    can_edit=can_edit,
                    can_delete=can_delete,
                )
            )
            rows_created += 1

    await session.commit()
    logger.info(
        "Seeded %d pages and %d role permissions", pages_created, rows_created,
    )


async def find_undeclared_pages(session: AsyncSession, page_keys: set[str]) -> set[str]:
    """Return the gate page keys that have no Page row."""
    stored = set((await session.execute(select(Page.page_key))).scalars().all())
    return page_keys - stored


# ────────────────────────────────────────────────────────────────────
# 4.  CLI entrypoint:  python -m backoffice.rbac.permission_seed
# ────────────────────────────────────────────────────────────────────
async def main() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as session:
        await seed(session)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
