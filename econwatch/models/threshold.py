"""ThresholdDefinition model: user-defined alert on a series' percent move."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from econwatch.db.session import Base


class ThresholdDefinition(Base):
    """Alert definition: breach when |percent change| >= magnitude_percent."""

    __tablename__ = "thresholds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    data_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("data.id", ondelete="CASCADE"), nullable=False, index=True
    )
    magnitude_percent: Mapped[float] = mapped_column(Float, nullable=False)
    notify_owner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    data: Mapped["Data"] = relationship("Data", back_populates="thresholds")
    owner: Mapped["User"] = relationship("User")
    recipient_links: Mapped[list["ThresholdRecipient"]] = relationship(
        "ThresholdRecipient", back_populates="threshold", cascade="all, delete-orphan"
    )
