"""FastAPI dependencies wiring sessions, repositories and services."""

from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.tour_repository import TourManagementRepository
from ..services.tour_service import TourService
from .database import get_db
from .exceptions import BadRequestError


def get_tour_repository(db: AsyncSession = Depends(get_db)) -> TourManagementRepository:
    """Repository bound to the request's database session."""
    return TourManagementRepository(db)


def get_tour_service(
    repository: TourManagementRepository = Depends(get_tour_repository),
) -> TourService:
    """Tour service for the current request."""
    return TourService(repository)


async def get_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON.

    An empty body decodes to None so handlers can reject it themselves.

    Raises:
        BadRequestError: If the body is not valid JSON
    """
    body = await request.body()
    if not body.strip():
        return None
    try:
        return await request.json()
    except ValueError:
        raise BadRequestError(detail="The request body is not valid JSON")


DatabaseSession = Depends(get_db)
