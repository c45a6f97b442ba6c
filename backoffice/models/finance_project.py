import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class FinanceProject(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "finance_projects"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    budget: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="active", nullable=False)

    def __repr__(self) -> str:
        return f"<FinanceProject {self.name}>"
