"""Conversions between tour DTOs and storage entities.

One function per DTO/entity pair; the read dispatch table below is the only
place representations are chosen by type.
"""

from collections.abc import Callable
from decimal import Decimal

from ..models.show import Show as ShowEntity
from ..models.tour import Tour as TourEntity
from ..schemas.show import Show, ShowForCreation
from ..schemas.tour import (
    Tour,
    TourForCreation,
    TourForUpdate,
    TourWithEstimatedProfits,
    TourWithEstimatedProfitsAndShows,
    TourWithManagerAndShowsForCreation,
    TourWithManagerForCreation,
    TourWithShows,
    TourWithShowsForCreation,
)


# Entity -> read representation

def show_to_dto(show: ShowEntity) -> Show:
    return Show(
        id=show.id,
        date=show.date,
        venue=show.venue,
        city=show.city,
        country=show.country,
    )


def _base_fields(tour: TourEntity) -> dict:
    return {
        "id": tour.id,
        "name": tour.name,
        "description": tour.description,
        "start_date": tour.start_date,
        "end_date": tour.end_date,
        "manager_id": tour.manager_id,
    }


def tour_to_dto(tour: TourEntity) -> Tour:
    return Tour(**_base_fields(tour))


def tour_to_dto_with_estimated_profits(tour: TourEntity) -> TourWithEstimatedProfits:
    return TourWithEstimatedProfits(
        **_base_fields(tour),
        estimated_profits=float(tour.estimated_profits),
    )


def tour_to_dto_with_shows(tour: TourEntity) -> TourWithShows:
    """Requires the entity to be loaded with its shows."""
    return TourWithShows(
        **_base_fields(tour),
        shows=[show_to_dto(show) for show in tour.shows],
    )


def tour_to_dto_with_estimated_profits_and_shows(tour: TourEntity) -> TourWithEstimatedProfitsAndShows:
    """Requires the entity to be loaded with its shows."""
    return TourWithEstimatedProfitsAndShows(
        **_base_fields(tour),
        estimated_profits=float(tour.estimated_profits),
        shows=[show_to_dto(show) for show in tour.shows],
    )


READ_MAPPERS: dict[type[Tour], Callable[[TourEntity], Tour]] = {
    Tour: tour_to_dto,
    TourWithEstimatedProfits: tour_to_dto_with_estimated_profits,
    TourWithShows: tour_to_dto_with_shows,
    TourWithEstimatedProfitsAndShows: tour_to_dto_with_estimated_profits_and_shows,
}


def map_tour(tour: TourEntity, representation: type[Tour]) -> Tour:
    """Map an entity into the given read representation."""
    try:
        mapper = READ_MAPPERS[representation]
    except KeyError:
        raise ValueError(f"No mapping registered for {representation.__name__}") from None
    return mapper(tour)


# Creation payload -> entity

def show_for_creation_to_entity(show: ShowForCreation) -> ShowEntity:
    return ShowEntity(
        date=show.date,
        venue=show.venue,
        city=show.city,
        country=show.country,
    )


def tour_for_creation_to_entity(tour: TourForCreation) -> TourEntity:
    # shows is always initialised so the collection never lazy-loads later
    return TourEntity(
        name=tour.name,
        description=tour.description,
        start_date=tour.start_date,
        end_date=tour.end_date,
        estimated_profits=Decimal(tour.estimated_profits),
        shows=[],
    )


def tour_with_manager_for_creation_to_entity(tour: TourWithManagerForCreation) -> TourEntity:
    entity = tour_for_creation_to_entity(tour)
    entity.manager_id = tour.manager_id
    return entity


def tour_with_shows_for_creation_to_entity(tour: TourWithShowsForCreation) -> TourEntity:
    entity = tour_for_creation_to_entity(tour)
    entity.shows = [show_for_creation_to_entity(show) for show in tour.shows]
    return entity


def tour_with_manager_and_shows_for_creation_to_entity(
    tour: TourWithManagerAndShowsForCreation,
) -> TourEntity:
    entity = tour_with_manager_for_creation_to_entity(tour)
    entity.shows = [show_for_creation_to_entity(show) for show in tour.shows]
    return entity


CREATION_MAPPERS: dict[type[TourForCreation], Callable[[TourForCreation], TourEntity]] = {
    TourForCreation: tour_for_creation_to_entity,
    TourWithManagerForCreation: tour_with_manager_for_creation_to_entity,
    TourWithShowsForCreation: tour_with_shows_for_creation_to_entity,
    TourWithManagerAndShowsForCreation: tour_with_manager_and_shows_for_creation_to_entity,
}


def map_creation(tour: TourForCreation) -> TourEntity:
    """Map any creation payload onto a new entity."""
    try:
        mapper = CREATION_MAPPERS[type(tour)]
    except KeyError:
        raise ValueError(f"No mapping registered for {type(tour).__name__}") from None
    return mapper(tour)


# Entity <-> update shape

def tour_to_update_dto(tour: TourEntity) -> TourForUpdate:
    # model_construct: stored rows are not re-validated before patching
    return TourForUpdate.model_construct(
        name=tour.name,
        description=tour.description,
        start_date=tour.start_date,
        end_date=tour.end_date,
    )


def apply_update_to_entity(update: TourForUpdate, tour: TourEntity) -> None:
    """Copy the validated update fields onto a tracked entity."""
    tour.name = update.name
    tour.description = update.description
    tour.start_date = update.start_date
    tour.end_date = update.end_date
