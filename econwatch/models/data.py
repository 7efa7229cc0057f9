"""Data model: latest/previous value per tracked economic series."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from econwatch.db.session import Base


class Data(Base):
    """Reconciled state of one external series.

    previous_value always holds the latest_value that was current before the
    last accepted reading; a fresh row has both set to the same value.
    """

    __tablename__ = "data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    series_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    previous_value: Mapped[float] = mapped_column(Float, nullable=False)
    latest_value: Mapped[float] = mapped_column(Float, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    year: Mapped[str] = mapped_column(String(4), nullable=False)
    period: Mapped[str] = mapped_column(String(8), nullable=False)

    thresholds: Mapped[list["ThresholdDefinition"]] = relationship(
        "ThresholdDefinition", back_populates="data"
    )
    history: Mapped[list["DataHistory"]] = relationship(
        "DataHistory", back_populates="data", cascade="all, delete-orphan"
    )
