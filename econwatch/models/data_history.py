"""DataHistory model: one row per accepted reading of a series."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from econwatch.db.session import Base


class DataHistory(Base):
    """Value observed for a series in a given reporting period."""

    __tablename__ = "data_history"

    __table_args__ = (
        UniqueConstraint("data_id", "year", "period", name="uq_data_history_data_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    data_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("data.id", ondelete="CASCADE"), nullable=False, index=True
    )
    year: Mapped[str] = mapped_column(String(4), nullable=False)
    period: Mapped[str] = mapped_column(String(8), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    data: Mapped["Data"] = relationship("Data", back_populates="history")
