"""Tour repository wrapping the async SQLAlchemy session."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.manager import Manager
from ..models.tour import Tour

logger = logging.getLogger(__name__)


class TourManagementRepository:
    """Data access for tours and their managers.

    Changes are staged on the session and only written by ``save``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tours(self) -> list[Tour]:
        """Get all tours ordered by start date, then name."""
        stmt = select(Tour).order_by(Tour.start_date, Tour.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_tour(self, tour_id: UUID, include_shows: bool = False) -> Optional[Tour]:
        """
        Get tour by ID.

        Args:
            tour_id: Tour ID to search for
            include_shows: Eagerly load the tour's shows

        Returns:
            Tour if found, None otherwise
        """
        stmt = select(Tour).where(Tour.id == tour_id)
        if include_shows:
            stmt = stmt.options(selectinload(Tour.shows))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def add_tour(self, tour: Tour) -> None:
        """Stage a new tour (and any shows attached to it) for insertion."""
        self.db.add(tour)

    async def update_tour(self, tour: Tour) -> None:
        """Stage changes made to a tracked tour."""
        self.db.add(tour)

    async def get_manager(self, manager_id: UUID) -> Optional[Manager]:
        return await self.db.get(Manager, manager_id)

    async def ensure_manager(self, manager_id: UUID, name: str) -> Manager:
        """Return the manager with the given ID, staging it first if it does not exist."""
        manager = await self.get_manager(manager_id)
        if manager is None:
            manager = Manager(id=manager_id, name=name)
            self.db.add(manager)
            logger.info(
                "Manager staged for creation",
                extra={"manager_id": str(manager_id), "name": name}
            )
        return manager

    async def save(self) -> bool:
        """
        Commit staged changes.

        Returns:
            True if the commit succeeded, False if it was rolled back
        """
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Commit failed, changes rolled back",
                extra={"error": str(e)},
                exc_info=True
            )
            return False
        return True
