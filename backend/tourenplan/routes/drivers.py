"""
Tourenplan Backend — Driver & Vehicle Routes
==============================================

What:  Lists and creates drivers and vehicles; deletes drivers.
Why:   Dispatchers maintain the master data that tours reference.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.database import get_db_session
from tourenplan.routes.deps import require_auth
from tourenplan.schemas.common import ErrorResponse, SuccessResponse
from tourenplan.schemas.tour import (
    DriverCreate,
    DriverResponse,
    VehicleCreate,
    VehicleResponse,
)
from tourenplan.services.tour_service import tour_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Drivers"], dependencies=[Depends(require_auth)])


@router.get("/fahrer", response_model=List[DriverResponse], summary="List drivers by name")
async def list_drivers(db: AsyncSession = Depends(get_db_session)) -> List[DriverResponse]:
    drivers = await tour_service.list_drivers(db)
    return [DriverResponse.model_validate(d) for d in drivers]


@router.post(
    "/fahrer",
    status_code=201,
    response_model=DriverResponse,
    responses={500: {"description": "Name already taken or store failure", "model": ErrorResponse}},
    summary="Create a driver",
)
async def create_driver(
    body: DriverCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DriverResponse:
    driver = await tour_service.create_driver(db, body.name)
    return DriverResponse.model_validate(driver)


@router.delete(
    "/fahrer/{driver_id}",
    response_model=SuccessResponse,
    responses={404: {"description": "Driver not found", "model": ErrorResponse}},
    summary="Delete a driver together with their tours and stops",
)
async def delete_driver(
    driver_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await tour_service.delete_driver(db, driver_id)
    return SuccessResponse()


@router.get("/fahrzeuge", response_model=List[VehicleResponse], summary="List vehicles by plate")
async def list_vehicles(db: AsyncSession = Depends(get_db_session)) -> List[VehicleResponse]:
    vehicles = await tour_service.list_vehicles(db)
    return [VehicleResponse.model_validate(v) for v in vehicles]


@router.post(
    "/fahrzeuge",
    status_code=201,
    response_model=VehicleResponse,
    summary="Create a vehicle",
)
async def create_vehicle(
    body: VehicleCreate,
    db: AsyncSession = Depends(get_db_session),
) -> VehicleResponse:
    vehicle = await tour_service.create_vehicle(db, body.kennzeichen)
    return VehicleResponse.model_validate(vehicle)
