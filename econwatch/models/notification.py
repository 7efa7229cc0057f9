"""NotificationRecord model: audit trail of alert messages."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from econwatch.db.session import Base


class NotificationRecord(Base):
    """One row per (breach × recipient), written after the send attempt.

    recipient_id is NULL for a breach that only notified the owner.
    data_year/data_period carry the period tag of the reading that triggered
    the breach, for repeat suppression.
    """

    __tablename__ = "notifications"

    __table_args__ = (
        Index("ix_notifications_threshold_period", "threshold_id", "data_year", "data_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    recipient_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("recipients.id", ondelete="SET NULL"), nullable=True
    )
    threshold_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("thresholds.id", ondelete="CASCADE"), nullable=False
    )
    sent_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    user_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivered: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    data_year: Mapped[str | None] = mapped_column(String(4), nullable=True)
    data_period: Mapped[str | None] = mapped_column(String(8), nullable=True)
