"""Show model definition."""

import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .tour import Tour


class Show(Base):
    """Show entity: a single performance date of a tour."""

    __tablename__ = "shows"

    id: Mapped[UUID] = mapped_column(PgUUID(as_uuid=True), primary_key=True, default=uuid4)

    tour_id: Mapped[UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("tours.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    venue: Mapped[str] = mapped_column(String(150), nullable=False)
    city: Mapped[str] = mapped_column(String(150), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    tour: Mapped["Tour"] = relationship("Tour", back_populates="shows")

    def __repr__(self) -> str:
        return f"<Show(id={self.id}, tour_id={self.tour_id}, date={self.date}, venue='{self.venue}')>"
