"""Unit tests for the tour service."""

from uuid import UUID, uuid4

import pytest

from tour_management.core.config import settings
from tour_management.core.exceptions import BadRequestError, TourSaveError, UnprocessableEntityError
from tour_management.models import Manager
from tour_management.schemas.tour import (
    TourForCreation,
    TourWithEstimatedProfitsAndShows,
    TourWithManagerForCreation,
    TourWithShowsForCreation,
)
from tour_management.services.tour_repository import TourManagementRepository
from tour_management.services.tour_service import TourService


class FailingSaveRepository(TourManagementRepository):
    """Repository whose commits always fail."""

    async def save(self) -> bool:
        await self.db.rollback()
        return False


@pytest.mark.asyncio
async def test_create_tour_assigns_fallback_manager(tour_service, sample_tour_data):
    """Tours created without a manager get the fallback manager."""
    tour = await tour_service.create_tour(sample_tour_data, TourForCreation)

    assert tour.name == "Northern Lights Tour"
    assert tour.manager_id == settings.fallback_manager_id
    assert tour.duration_days == 42


@pytest.mark.asyncio
async def test_create_tour_keeps_given_manager(tour_service, test_session, sample_tour_data):
    """An explicit manager is kept."""
    manager = Manager(id=uuid4(), name="Touring Manager")
    test_session.add(manager)
    await test_session.commit()

    tour = await tour_service.create_tour(
        {**sample_tour_data, "manager_id": str(manager.id)}, TourWithManagerForCreation
    )

    assert tour.manager_id == manager.id


@pytest.mark.asyncio
async def test_create_tour_nil_manager_uses_fallback(tour_service, sample_tour_data):
    """The nil UUID counts as no manager."""
    tour = await tour_service.create_tour(
        {**sample_tour_data, "manager_id": str(UUID(int=0))}, TourWithManagerForCreation
    )

    assert tour.manager_id == settings.fallback_manager_id


@pytest.mark.asyncio
async def test_create_tour_ignores_fields_of_other_shapes(tour_service, sample_tour_data, sample_shows_data):
    """The plain creation shape never carries a manager or shows."""
    tour = await tour_service.create_tour(
        {**sample_tour_data, "manager_id": str(uuid4()), "shows": sample_shows_data},
        TourForCreation,
    )
    stored = await tour_service.get_tour(tour.id, TourWithEstimatedProfitsAndShows, include_shows=True)

    assert stored.manager_id == settings.fallback_manager_id
    assert stored.shows == []


@pytest.mark.asyncio
async def test_create_tour_with_shows(tour_service, sample_tour_data, sample_shows_data):
    """Shows in the payload are stored with the tour."""
    tour = await tour_service.create_tour(
        {**sample_tour_data, "shows": sample_shows_data}, TourWithShowsForCreation
    )
    stored = await tour_service.get_tour(tour.id, TourWithEstimatedProfitsAndShows, include_shows=True)

    assert stored.estimated_profits == 1250000.5
    assert [show.city for show in stored.shows] == ["Oslo", "Stockholm"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, [], "tour", 42])
async def test_create_tour_requires_object(tour_service, payload):
    """Payloads that are not JSON objects are bad requests."""
    with pytest.raises(BadRequestError):
        await tour_service.create_tour(payload, TourForCreation)


@pytest.mark.asyncio
async def test_create_tour_validation_failure(tour_service, sample_tour_data):
    """Invalid payloads raise 422 and store nothing."""
    with pytest.raises(UnprocessableEntityError) as exc_info:
        await tour_service.create_tour(
            {**sample_tour_data, "name": "", "estimated_profits": -1}, TourForCreation
        )

    errors = exc_info.value.errors
    assert errors["name"][0].validator_key == "required"
    assert errors["estimated_profits"][0].validator_key == "range"
    assert await tour_service.get_tours() == []


@pytest.mark.asyncio
async def test_create_tour_save_failure(test_session, fallback_manager, sample_tour_data):
    """A failed commit on creation raises TourSaveError."""
    service = TourService(FailingSaveRepository(test_session))

    with pytest.raises(TourSaveError, match="Adding a tour failed on save."):
        await service.create_tour(sample_tour_data, TourForCreation)


@pytest.mark.asyncio
async def test_get_tours_ordered_by_start_date(tour_service, sample_tour_data):
    """Tours are listed by start date."""
    await tour_service.create_tour({**sample_tour_data, "name": "Later"}, TourForCreation)
    await tour_service.create_tour(
        {**sample_tour_data, "name": "Earlier", "start_date": "2027-01-01"}, TourForCreation
    )

    tours = await tour_service.get_tours()

    assert [tour.name for tour in tours] == ["Earlier", "Later"]


@pytest.mark.asyncio
async def test_get_missing_tour(tour_service):
    """Unknown tours are reported as bad requests."""
    with pytest.raises(BadRequestError) as exc_info:
        await tour_service.get_tour(uuid4())

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_partially_update_tour(tour_service, sample_tour_data):
    """A valid patch is applied and persisted."""
    tour = await tour_service.create_tour(sample_tour_data, TourForCreation)

    await tour_service.partially_update_tour(
        tour.id,
        [
            {"op": "replace", "path": "/name", "value": "Aurora Tour"},
            {"op": "replace", "path": "/end_date", "value": "2027-03-01"},
        ],
    )
    updated = await tour_service.get_tour(tour.id)

    assert updated.name == "Aurora Tour"
    assert updated.description == sample_tour_data["description"]
    assert updated.end_date.isoformat() == "2027-03-01"


@pytest.mark.asyncio
async def test_partially_update_tour_invalid_not_persisted(tour_service, sample_tour_data):
    """An invalid patch leaves the tour unchanged."""
    tour = await tour_service.create_tour(sample_tour_data, TourForCreation)

    with pytest.raises(UnprocessableEntityError) as exc_info:
        await tour_service.partially_update_tour(
            tour.id,
            [
                {"op": "replace", "path": "/name", "value": "Renamed"},
                {"op": "remove", "path": "/description"},
            ],
        )

    assert list(exc_info.value.errors) == ["description"]
    unchanged = await tour_service.get_tour(tour.id)
    assert unchanged.name == "Northern Lights Tour"


@pytest.mark.asyncio
@pytest.mark.parametrize("document", [None, {"op": "replace"}, [{"op": "replace"}], ["nope"]])
async def test_partially_update_tour_malformed_document(tour_service, sample_tour_data, document):
    """Malformed patch documents are bad requests."""
    tour = await tour_service.create_tour(sample_tour_data, TourForCreation)

    with pytest.raises(BadRequestError):
        await tour_service.partially_update_tour(tour.id, document)


@pytest.mark.asyncio
async def test_partially_update_missing_tour(tour_service):
    """Patching an unknown tour is a bad request."""
    with pytest.raises(BadRequestError):
        await tour_service.partially_update_tour(
            uuid4(), [{"op": "replace", "path": "/name", "value": "Ghost"}]
        )


@pytest.mark.asyncio
async def test_partially_update_tour_save_failure(test_session, tour_service, sample_tour_data):
    """A failed commit on update raises TourSaveError."""
    tour = await tour_service.create_tour(sample_tour_data, TourForCreation)
    service = TourService(FailingSaveRepository(test_session))

    with pytest.raises(TourSaveError, match="Updating a tour failed on save."):
        await service.partially_update_tour(
            tour.id, [{"op": "replace", "path": "/name", "value": "Aurora Tour"}]
        )
