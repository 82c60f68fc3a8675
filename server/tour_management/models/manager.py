"""Manager model definition."""

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID as PgUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .tour import Tour


class Manager(Base):
    """Manager entity; every tour is run by exactly one manager."""

    __tablename__ = "managers"

    id: Mapped[UUID] = mapped_column(PgUUID(as_uuid=True), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    tours: Mapped[list["Tour"]] = relationship("Tour", back_populates="manager")

    def __repr__(self) -> str:
        return f"<Manager(id={self.id}, name='{self.name}')>"
