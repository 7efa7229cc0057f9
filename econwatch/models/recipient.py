"""Recipient model: notification target independent of any user."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from econwatch.db.session import Base


class Recipient(Base):
    """Third-party recipient (e.g. a representative) linked to thresholds."""

    __tablename__ = "recipients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)
