"""ThresholdRecipient join model (set semantics via composite primary key)."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from econwatch.db.session import Base


class ThresholdRecipient(Base):
    """Links a threshold definition to one fan-out recipient."""

    __tablename__ = "threshold_recipients"

    threshold_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("thresholds.id", ondelete="CASCADE"), primary_key=True
    )
    recipient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipients.id", ondelete="CASCADE"), primary_key=True
    )

    threshold: Mapped["ThresholdDefinition"] = relationship(
        "ThresholdDefinition", back_populates="recipient_links"
    )
    recipient: Mapped["Recipient"] = relationship("Recipient")
