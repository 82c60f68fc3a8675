"""Tour model definition."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .manager import Manager
    from .show import Show


class Tour(Base):
    """Tour entity representing a touring engagement."""

    __tablename__ = "tours"

    # Primary key
    id: Mapped[UUID] = mapped_column(PgUUID(as_uuid=True), primary_key=True, default=uuid4)

    # Tour information
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Financials
    estimated_profits: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )

    # Foreign key to manager
    manager_id: Mapped[UUID] = mapped_column(
        PgUUID(as_uuid=True),
        ForeignKey("managers.id"),
        nullable=False,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("estimated_profits >= 0", name="ck_tour_estimated_profits_non_negative"),
    )

    # Relationships
    manager: Mapped["Manager"] = relationship("Manager", back_populates="tours")
    shows: Mapped[list["Show"]] = relationship(
        "Show",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by="Show.date"
    )

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, name='{self.name}', manager_id={self.manager_id})>"
