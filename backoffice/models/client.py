"""
Client model.

A Client is a customer company.  Campaigns, ad accounts and finance
projects reference it through `client_id`; `client`-role users are
bound to exactly one Client and only ever see rows carrying its id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from backoffice.models.user import User


class Client(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # ── Relationships ────────────────────────────────────────────────
    users: Mapped[list["User"]] = relationship(  # noqa: F821
        back_populates="client",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Client {self.name}>"
