"""
Page model.

A Page is a named unit of functionality that can be gated on its own
(e.g. `campaigns`, `finance`, `admin`).  Routes reference it by the
stable `page_key` slug, never by `id`, so keys survive data import /
merge between environments.  `display_name`, `path` and `description`
are presentation metadata only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from backoffice.models.role_permission import RolePermission


class Page(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "pages"

    page_key: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    path: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # ── Relationships ────────────────────────────────────────────────
    role_permissions: Mapped[list["RolePermission"]] = relationship(  # noqa: F821
        back_populates="page",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Page {self.page_key}>"
