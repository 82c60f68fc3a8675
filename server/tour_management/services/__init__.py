"""Service layer package."""

from .tour_repository import TourManagementRepository
from .tour_service import TourService

__all__ = [
    "TourManagementRepository",
    "TourService",
]
