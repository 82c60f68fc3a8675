#!/usr/bin/env python3
"""Create the schema and seed managers, tours and shows for local development."""

import asyncio
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from uuid import UUID

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from tour_management.core.config import settings  # noqa: E402
from tour_management.core.database import async_session_factory, close_db, init_db  # noqa: E402
from tour_management.models import Show, Tour  # noqa: E402
from tour_management.services.tour_repository import TourManagementRepository  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_MANAGER_ID = UUID("c3b7f625-c07f-4d7d-9be1-ddff8ff93b4d")


def sample_tours() -> list[Tour]:
    return [
        Tour(
            name="Rise of the Phoenix",
            description="Very hot loud music",
            start_date=date(2027, 2, 18),
            end_date=date(2027, 4, 12),
            estimated_profits=Decimal("2500000.00"),
            manager_id=SAMPLE_MANAGER_ID,
            shows=[
                Show(date=date(2027, 2, 18), venue="Lotto Arena", city="Antwerp", country="Belgium"),
                Show(date=date(2027, 2, 21), venue="Ziggo Dome", city="Amsterdam", country="Netherlands"),
                Show(date=date(2027, 3, 2), venue="Olympiahalle", city="Munich", country="Germany"),
            ],
        ),
        Tour(
            name="Nocturnal Migrations",
            description="Ambient sets in unusual places",
            start_date=date(2027, 6, 1),
            end_date=date(2027, 7, 15),
            estimated_profits=Decimal("420000.00"),
            manager_id=settings.fallback_manager_id,
            shows=[
                Show(date=date(2027, 6, 1), venue="Botanique", city="Brussels", country="Belgium"),
            ],
        ),
    ]


async def seed() -> None:
    logger.info("Creating database schema...")
    await init_db()

    async with async_session_factory() as session:
        repository = TourManagementRepository(session)

        await repository.ensure_manager(settings.fallback_manager_id, settings.fallback_manager_name)
        await repository.ensure_manager(SAMPLE_MANAGER_ID, "Sample Manager")

        if await repository.get_tours():
            logger.info("Tours already present, skipping sample tours")
        else:
            for tour in sample_tours():
                await repository.add_tour(tour)

        if not await repository.save():
            raise RuntimeError("Seeding failed on save.")

    logger.info("Seed data created successfully!")


async def main() -> None:
    try:
        await seed()
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
