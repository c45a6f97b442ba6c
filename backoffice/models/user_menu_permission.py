"""
UserMenuPermission model — per-user sidebar visibility.

One row per user.  Each flag hides or shows a top-level menu section in
the admin UI.  This is navigation state only: route access is decided by
`RolePermission` through the page gate, and nothing in `rbac/` reads
this table.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from backoffice.models.user import User

MENU_FLAGS: tuple[str, ...] = (
    "dashboard",
    "campaign_management",
    "client_management",
    "ad_accounts",
    "work_reports",
    "advantix_dashboard",
    "projects",
    "payments",
    "expenses_salaries",
    "salary_management",
    "reports",
    "fb_ad_management",
    "advantix_ads_manager",
    "own_farming",
    "new_created",
    "farming_accounts",
    "admin_panel",
)


def _flag() -> Mapped[bool]:
    return mapped_column(Boolean, default=False, nullable=False)


class UserMenuPermission(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "user_menu_permissions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    dashboard: Mapped[bool] = _flag()
    campaign_management: Mapped[bool] = _flag()
    client_management: Mapped[bool] = _flag()
    ad_accounts: Mapped[bool] = _flag()
    work_reports: Mapped[bool] = _flag()
    advantix_dashboard: Mapped[bool] = _flag()
    projects: Mapped[bool] = _flag()
    payments: Mapped[bool] = _flag()
    expenses_salaries: Mapped[bool] = _flag()
    salary_management: Mapped[bool] = _flag()
    reports: Mapped[bool] = _flag()
    fb_ad_management: Mapped[bool] = _flag()
    advantix_ads_manager: Mapped[bool] = _flag()
    own_farming: Mapped[bool] = _flag()
    new_created: Mapped[bool] = _flag()
    farming_accounts: Mapped[bool] = _flag()
    admin_panel: Mapped[bool] = _flag()

    # ── Relationships ────────────────────────────────────────────────
    user: Mapped["User"] = relationship(  # noqa: F821
        back_populates="menu_permission",
    )

    def __repr__(self) -> str:
        return f"<UserMenuPermission user={self.user_id}>"
