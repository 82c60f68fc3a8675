"""Tour router: content-negotiated reads, creation and JSON Patch updates.

GET /tours/{id} picks its representation from the Accept header and POST
/tours picks its payload shape from the Content-Type header, both through
RepresentationTable lookups declared below.
"""

import logging
from dataclasses import dataclass
from typing import Union
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.dependencies import get_json_body, get_tour_service
from ..core.exceptions import UnsupportedMediaTypeError
from ..core.negotiation import RepresentationTable
from ..core.observability import metrics_collector
from ..schemas.common import Problem, ValidationProblem
from ..schemas.tour import (
    Tour,
    TourForCreation,
    TourWithEstimatedProfits,
    TourWithEstimatedProfitsAndShows,
    TourWithManagerAndShowsForCreation,
    TourWithManagerForCreation,
    TourWithShows,
    TourWithShowsForCreation,
)
from ..services.tour_service import TourService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tours", tags=["tours"])


@dataclass(frozen=True)
class TourRepresentation:
    """Read DTO to produce and whether it needs the tour's shows."""

    schema: type[Tour]
    include_shows: bool = False


read_representations: RepresentationTable[TourRepresentation] = RepresentationTable("Accept")
read_representations.register_fallback("default", TourRepresentation(Tour))
read_representations.register(
    "tour",
    TourRepresentation(Tour),
    [settings.vendor_media_type("tour")],
)
read_representations.register(
    "tourwithestimatedprofits",
    TourRepresentation(TourWithEstimatedProfits),
    [settings.vendor_media_type("tourwithestimatedprofits")],
)
read_representations.register(
    "tourwithshows",
    TourRepresentation(TourWithShows, include_shows=True),
    [settings.vendor_media_type("tourwithshows")],
)
read_representations.register(
    "tourwithestimatedprofitsandshows",
    TourRepresentation(TourWithEstimatedProfitsAndShows, include_shows=True),
    [settings.vendor_media_type("tourwithestimatedprofitsandshows")],
)

creation_shapes: RepresentationTable[type[TourForCreation]] = RepresentationTable("Content-Type")
creation_shapes.register(
    "tourforcreation",
    TourForCreation,
    ["application/json", settings.vendor_media_type("tourforcreation")],
)
creation_shapes.register(
    "tourwithmanagerforcreation",
    TourWithManagerForCreation,
    [settings.vendor_media_type("tourwithmanagerforcreation")],
)
creation_shapes.register(
    "tourwithshowsforcreation",
    TourWithShowsForCreation,
    [settings.vendor_media_type("tourwithshowsforcreation")],
)
creation_shapes.register(
    "tourwithmanagerandshowsforcreation",
    TourWithManagerAndShowsForCreation,
    [settings.vendor_media_type("tourwithmanagerandshowsforcreation")],
)


@router.get("", response_model=list[Tour])
async def get_tours(service: TourService = Depends(get_tour_service)) -> list[Tour]:
    """List all tours in the base representation."""
    return await service.get_tours()


@router.get(
    "/{tour_id}",
    name="get_tour",
    response_model=Union[
        TourWithEstimatedProfitsAndShows, TourWithShows, TourWithEstimatedProfits, Tour
    ],
    responses={400: {"model": Problem}},
)
async def get_tour(
    tour_id: UUID,
    request: Request,
    service: TourService = Depends(get_tour_service),
) -> JSONResponse:
    """
    Get a tour.

    The Accept header selects the representation:
    application/vnd.<vendor>.tour+json, ...tourwithestimatedprofits+json,
    ...tourwithshows+json or ...tourwithestimatedprofitsandshows+json.
    Anything else yields the base representation as application/json.
    """
    route = read_representations.select(request.headers)
    representation = route.handler

    tour = await service.get_tour(
        tour_id,
        representation=representation.schema,
        include_shows=representation.include_shows,
    )

    metrics_collector.record_representation_served(route.name)
    logger.debug(
        "Tour representation selected",
        extra={"tour_id": str(tour_id), "representation": route.name}
    )

    return JSONResponse(
        status_code=200,
        content=tour.model_dump(mode="json"),
        media_type=route.media_type,
        headers={"Vary": "Accept"},
    )


@router.post(
    "",
    status_code=201,
    response_model=Tour,
    responses={
        400: {"model": Problem},
        415: {"model": Problem},
        422: {"model": ValidationProblem},
    },
)
async def create_tour(
    request: Request,
    service: TourService = Depends(get_tour_service),
) -> JSONResponse:
    """
    Create a tour.

    The Content-Type header selects the payload shape: application/json or
    ...tourforcreation+json, ...tourwithmanagerforcreation+json,
    ...tourwithshowsforcreation+json or
    ...tourwithmanagerandshowsforcreation+json. Tours created without a
    manager are assigned the fallback manager.
    """
    route = creation_shapes.select(request.headers)
    if route is None:
        raise UnsupportedMediaTypeError(
            request.headers.get("Content-Type"), creation_shapes.media_types
        )

    payload = await get_json_body(request)
    tour = await service.create_tour(payload, route.handler)

    return JSONResponse(
        status_code=201,
        content=tour.model_dump(mode="json"),
        headers={"Location": str(request.url_for("get_tour", tour_id=str(tour.id)))},
    )


@router.patch(
    "/{tour_id}",
    status_code=204,
    response_class=Response,
    responses={400: {"model": Problem}, 422: {"model": ValidationProblem}},
)
async def partially_update_tour(
    tour_id: UUID,
    request: Request,
    service: TourService = Depends(get_tour_service),
) -> Response:
    """
    Apply a JSON Patch document (application/json-patch+json) to a tour.

    Only name, description, start_date and end_date can be patched.
    """
    document = await get_json_body(request)
    await service.partially_update_tour(tour_id, document)
    return Response(status_code=204)
