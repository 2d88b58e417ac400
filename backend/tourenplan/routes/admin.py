"""
Tourenplan Backend — Demo/Reset Routes
========================================

What:  POST /reset wipes all data; POST /seed-demo loads a demo tour for today.
Why:   Operational shortcuts for demos; both require a token.

Seeding is not idempotent at the tour level: each call adds one more tour
for the demo driver.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.database import get_db_session
from tourenplan.routes.deps import require_auth
from tourenplan.schemas.common import ErrorResponse, SuccessResponse
from tourenplan.schemas.tour import (
    DriverResponse,
    SeedResponse,
    StopResponse,
    TourResponse,
    VehicleResponse,
)
from tourenplan.services.demo_service import demo_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"], dependencies=[Depends(require_auth)])


@router.post(
    "/reset",
    response_model=SuccessResponse,
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="Delete all stops, tours, vehicles and drivers",
)
async def reset(db: AsyncSession = Depends(get_db_session)) -> SuccessResponse:
    await demo_service.reset(db)
    return SuccessResponse(message="Alle Daten gelöscht")


@router.post(
    "/seed-demo",
    status_code=201,
    response_model=SeedResponse,
    responses={500: {"description": "Seed rolled back", "model": ErrorResponse}},
    summary="Create demo driver, vehicle and a tour with three stops",
)
async def seed_demo(db: AsyncSession = Depends(get_db_session)) -> SeedResponse:
    driver, vehicle, tour, stops = await demo_service.seed(db)
    return SeedResponse(
        fahrer=DriverResponse.model_validate(driver),
        fahrzeug=VehicleResponse.model_validate(vehicle),
        tour=TourResponse.model_validate(tour),
        stopps=[StopResponse.model_validate(s) for s in stops],
    )
