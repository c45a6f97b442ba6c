"""
RolePermission model — the (view, edit, delete) triple for a role on a page.

At most one row per (role, page).  The three flags are independent
columns: nothing at the data layer couples `can_edit` / `can_delete` to
`can_view`, and the evaluator reads each action's own column.  A missing
row means "deny".
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, value_enum
from backoffice.models.user import UserRole

if TYPE_CHECKING:
    from backoffice.models.page import Page


class RolePermission(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "role_permissions"

    role: Mapped[UserRole] = mapped_column(
        value_enum(UserRole, "permission_role"),
        nullable=False,
        index=True,
    )
    page_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
    )
    can_view: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_edit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_delete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ── Relationships ────────────────────────────────────────────────
    page: Mapped["Page"] = relationship(  # noqa: F821
        back_populates="role_permissions",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("role", "page_id", name="uq_role_permissions_role_page"),
    )

    def __repr__(self) -> str:
        return (
            f"<RolePermission {self.role.value} page={self.page_id} "
            f"v={self.can_view} e={self.can_edit} d={self.can_delete}>"
        )
