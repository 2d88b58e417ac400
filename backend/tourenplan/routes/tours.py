"""
Tourenplan Backend — Tour Route Handlers
==========================================

What:  Tour creation/deletion, the driver/date lookup, and the per-tour
       stop collection (list, create, reorder).
Who:   The dispatcher UI creates tours; the driver app fetches its tour
       for the day.

Route Order:
    GET /touren/{tour_id}/stopps is registered before
    GET /touren/{fahrer_id}/{datum}. Both have two path segments and
    Starlette matches in registration order; the date route would
    otherwise catch ".../stopps" and fail date parsing with 422.
"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.database import get_db_session
from tourenplan.routes.deps import require_auth
from tourenplan.schemas.common import ErrorResponse, SuccessResponse
from tourenplan.schemas.tour import (
    ReorderRequest,
    StopCreate,
    StopResponse,
    TourCreate,
    TourResponse,
    TourWithStops,
)
from tourenplan.services.stop_service import stop_service
from tourenplan.services.tour_service import tour_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tours"], dependencies=[Depends(require_auth)])


@router.post(
    "/touren",
    status_code=201,
    response_model=TourWithStops,
    responses={500: {"description": "Unknown driver/vehicle or store failure", "model": ErrorResponse}},
    summary="Create a tour (optionally with its stops)",
)
async def create_tour(
    body: TourCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TourWithStops:
    tour, stops = await tour_service.create_tour(db, body)
    return TourWithStops(
        tour=TourResponse.model_validate(tour),
        stopps=[StopResponse.model_validate(s) for s in stops],
    )


@router.delete(
    "/touren/{tour_id}",
    response_model=SuccessResponse,
    responses={404: {"description": "Tour not found", "model": ErrorResponse}},
    summary="Delete a tour and its stops",
)
async def delete_tour(
    tour_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await tour_service.delete_tour(db, tour_id)
    return SuccessResponse()


@router.get(
    "/touren/{tour_id}/stopps",
    response_model=List[StopResponse],
    responses={404: {"description": "Tour not found", "model": ErrorResponse}},
    summary="Stops of a tour in sequence order",
)
async def list_stops(
    tour_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[StopResponse]:
    stops = await stop_service.list_tour_stops(db, tour_id)
    return [StopResponse.model_validate(s) for s in stops]


@router.post(
    "/touren/{tour_id}/stopps",
    status_code=201,
    response_model=StopResponse,
    responses={500: {"description": "Unknown tour or store failure", "model": ErrorResponse}},
    summary="Add a stop with an explicit sequence index",
)
async def create_stop(
    tour_id: int,
    body: StopCreate,
    db: AsyncSession = Depends(get_db_session),
) -> StopResponse:
    stop = await stop_service.create_stop(db, tour_id, body)
    return StopResponse.model_validate(stop)


@router.put(
    "/touren/{tour_id}/reihenfolge",
    response_model=List[StopResponse],
    responses={
        400: {"description": "Not a permutation of the tour's stops", "model": ErrorResponse},
        404: {"description": "Tour not found", "model": ErrorResponse},
    },
    summary="Reorder all stops of a tour",
)
async def reorder_stops(
    tour_id: int,
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db_session),
) -> List[StopResponse]:
    stops = await stop_service.reorder_stops(db, tour_id, body.stopp_ids)
    return [StopResponse.model_validate(s) for s in stops]


@router.get(
    "/touren/{fahrer_id}/{datum}",
    response_model=TourWithStops,
    summary="Tour and ordered stops of a driver on a date",
    description=(
        "Returns {\"tour\": null, \"stopps\": []} when the driver has no tour "
        "on that date. Dates use ISO format (YYYY-MM-DD)."
    ),
)
async def get_tour_for_driver(
    fahrer_id: int,
    datum: date,
    db: AsyncSession = Depends(get_db_session),
) -> TourWithStops:
    return await tour_service.get_tour_for_driver(db, fahrer_id, datum)
