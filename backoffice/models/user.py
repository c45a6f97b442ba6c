"""
User model.

Design decisions:
- Exactly one role per user, drawn from the closed `UserRole` enum.
  Page access for that role lives in `role_permissions`; the user row
  never carries per-page flags.
- `client_id` is only set for `client`-role users and scopes every
  client-bound query they make (see `rbac.context_resolver`).
- Menu visibility (`UserMenuPermission`) hangs off the user but is
  advisory UI state, not an authorization input.
"""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, value_enum

if TYPE_CHECKING:
    from backoffice.models.client import Client
    from backoffice.models.user_menu_permission import UserMenuPermission


class UserRole(str, enum.Enum):
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    CLIENT = "client"


ADMIN_ROLES: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        value_enum(UserRole, "user_role"),
        default=UserRole.USER,
        nullable=False,
    )
    client_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # ── Relationships ────────────────────────────────────────────────
    client: Mapped["Client | None"] = relationship(  # noqa: F821
        back_populates="users",
        lazy="selectin",
    )
    menu_permission: Mapped["UserMenuPermission | None"] = relationship(  # noqa: F821
        back_populates="user",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User {self.username} [{self.role.value}]>"
