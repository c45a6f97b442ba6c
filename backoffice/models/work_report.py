"""
WorkReport model.

Owned by the submitting user (`user_id`), not by a client.  Access to a
single report is decided per record by the ownership-or-admin rule.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class WorkReport(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "work_reports"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="submitted", nullable=False)

    def __repr__(self) -> str:
        return f"<WorkReport {self.title} by={self.user_id}>"
