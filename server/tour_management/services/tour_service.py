"""Tour service orchestrating reads, creation and partial updates."""

import logging
from typing import Any, Optional
from uuid import UUID

from pydantic import ValidationError

from ..core.config import settings
from ..core.exceptions import BadRequestError, TourSaveError, UnprocessableEntityError
from ..core.observability import metrics_collector
from ..core.validation import ModelState, ValidationResult
from ..schemas.patch import PatchDocument
from ..schemas.tour import Tour, TourForCreation
from .patch_service import apply_patch
from .tour_mapper import (
    apply_update_to_entity,
    map_creation,
    map_tour,
    tour_to_dto,
    tour_to_update_dto,
)
from .tour_repository import TourManagementRepository

logger = logging.getLogger(__name__)

NIL_UUID = UUID(int=0)


class TourService:
    """Service for tour-related operations."""

    def __init__(
        self,
        repository: TourManagementRepository,
        fallback_manager_id: Optional[UUID] = None,
    ):
        self.repository = repository
        self.fallback_manager_id = fallback_manager_id or settings.fallback_manager_id

    async def get_tours(self) -> list[Tour]:
        """Get every tour in the base representation, in repository order."""
        tours = await self.repository.get_tours()
        return [tour_to_dto(tour) for tour in tours]

    async def get_tour(
        self,
        tour_id: UUID,
        representation: type[Tour] = Tour,
        include_shows: bool = False,
    ) -> Tour:
        """
        Get one tour in the requested representation.

        Args:
            tour_id: Tour ID
            representation: Read DTO class to map into
            include_shows: Load shows; required by representations that carry them

        Raises:
            BadRequestError: If the tour does not exist
        """
        tour = await self.repository.get_tour(tour_id, include_shows=include_shows)
        if tour is None:
            # Unknown tours are answered with 400, not 404
            logger.warning("Tour not found", extra={"tour_id": str(tour_id)})
            raise BadRequestError(detail=f"Tour '{tour_id}' could not be found")

        return map_tour(tour, representation)

    async def create_tour(self, payload: Any, schema: type[TourForCreation]) -> Tour:
        """
        Validate a creation payload and persist the new tour.

        Args:
            payload: Decoded JSON body
            schema: Creation shape selected from the request's Content-Type

        Returns:
            The created tour in the base representation

        Raises:
            BadRequestError: If the payload is missing or not a JSON object
            UnprocessableEntityError: If the payload fails validation
            TourSaveError: If the commit fails
        """
        if not isinstance(payload, dict):
            raise BadRequestError(detail="A tour object is required in the request body")

        try:
            tour_to_create = schema.model_validate(payload)
        except ValidationError as e:
            model_state = ModelState()
            model_state.add_validation_error(e, schema.__name__)
            metrics_collector.record_validation_failure("create")
            logger.info(
                "Tour creation rejected by validation",
                extra={"schema": schema.__name__, "fields": list(model_state)}
            )
            raise UnprocessableEntityError(ValidationResult.from_model_state(model_state))

        tour = map_creation(tour_to_create)
        if tour.manager_id is None or tour.manager_id == NIL_UUID:
            tour.manager_id = self.fallback_manager_id

        await self.repository.add_tour(tour)
        if not await self.repository.save():
            raise TourSaveError("Adding a tour failed on save.")

        metrics_collector.record_tour_created(schema.__name__)
        logger.info(
            "Tour created successfully",
            extra={
                "tour_id": str(tour.id),
                "manager_id": str(tour.manager_id),
                "shows": len(tour.shows),
                "schema": schema.__name__,
            }
        )

        return tour_to_dto(tour)

    async def partially_update_tour(self, tour_id: UUID, document: Any) -> None:
        """
        Apply a JSON Patch document to a tour.

        Args:
            tour_id: Tour ID
            document: Decoded JSON body, expected to be a list of operations

        Raises:
            BadRequestError: If the document is missing or malformed, or the tour does not exist
            UnprocessableEntityError: If patching or re-validation fails
            TourSaveError: If the commit fails
        """
        if document is None:
            raise BadRequestError(detail="A patch document is required in the request body")

        try:
            operations = PatchDocument.validate_python(document)
        except ValidationError as e:
            logger.info("Malformed patch document", extra={"error": str(e)})
            raise BadRequestError(detail="The patch document is malformed")

        tour = await self.repository.get_tour(tour_id)
        if tour is None:
            logger.warning("Tour not found for update", extra={"tour_id": str(tour_id)})
            raise BadRequestError(detail=f"Tour '{tour_id}' could not be found")

        model_state = ModelState()
        patched = apply_patch(operations, tour_to_update_dto(tour), model_state)
        if patched is None:
            metrics_collector.record_validation_failure("patch")
            logger.info(
                "Tour patch rejected",
                extra={"tour_id": str(tour_id), "fields": list(model_state)}
            )
            raise UnprocessableEntityError(ValidationResult.from_model_state(model_state))

        apply_update_to_entity(patched, tour)
        await self.repository.update_tour(tour)
        if not await self.repository.save():
            raise TourSaveError("Updating a tour failed on save.")

        metrics_collector.record_tour_updated()
        logger.info(
            "Tour updated successfully",
            extra={"tour_id": str(tour_id), "operations": len(operations)}
        )
