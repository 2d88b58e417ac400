"""
Tourenplan Backend — Tour Service
===================================

What:  Drivers, vehicles, tours, and the driver/date tour lookup.
Why:   Keeps the read-path assumptions (one tour per driver and date,
       stops in sequence order) in one place.
How:   Stateless; receives the request's AsyncSession, flushes, and wraps
       store failures in DatabaseError.

Lookup Contract (GET /touren/{fahrer_id}/{datum}):
    No tour for that driver/date is a normal answer, not an error:
    the result is TourWithStops(tour=None, stopps=[]). Callers must
    tell "no data" apart from failures by the tour field, not by status.

    Several tours for the same driver/date are possible (nothing enforces
    uniqueness, the demo seed creates duplicates). The oldest one wins:
        SELECT ... WHERE fahrer_id = :f AND datum = :d ORDER BY id LIMIT 1
"""

import logging
from datetime import date
from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.exceptions import NotFoundError, database_error
from tourenplan.models.driver import Driver
from tourenplan.models.stop import Stop
from tourenplan.models.tour import Tour
from tourenplan.models.vehicle import Vehicle
from tourenplan.schemas.tour import (
    StopResponse,
    TourCreate,
    TourResponse,
    TourWithStops,
)
from tourenplan.services.stop_service import stop_service

logger = logging.getLogger(__name__)


class TourService:
    """Business logic for drivers, vehicles and tours."""

    # ── Drivers ───────────────────────────────────────────────────────────

    async def list_drivers(self, db: AsyncSession) -> List[Driver]:
        result = await db.execute(select(Driver).order_by(Driver.name.asc()))
        return list(result.scalars().all())

    async def create_driver(self, db: AsyncSession, name: str) -> Driver:
        driver = Driver(name=name)
        try:
            db.add(driver)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to create driver %r: %s", name, str(e))
            raise database_error(e, "Could not create the driver.")
        logger.info("Driver %s created", driver.id)
        return driver

    async def delete_driver(self, db: AsyncSession, driver_id: int) -> None:
        """
        Delete a driver; the foreign keys cascade to tours and their stops.
        """
        try:
            result = await db.execute(delete(Driver).where(Driver.id == driver_id))
        except SQLAlchemyError as e:
            raise database_error(e, "Could not delete the driver.", driver_id=driver_id)
        if result.rowcount == 0:
            raise NotFoundError(resource="driver", resource_id=driver_id)
        logger.info("Driver %s deleted (tours and stops cascaded)", driver_id)

    # ── Vehicles ──────────────────────────────────────────────────────────

    async def list_vehicles(self, db: AsyncSession) -> List[Vehicle]:
        result = await db.execute(select(Vehicle).order_by(Vehicle.kennzeichen.asc()))
        return list(result.scalars().all())

    async def create_vehicle(self, db: AsyncSession, kennzeichen: str) -> Vehicle:
        vehicle = Vehicle(kennzeichen=kennzeichen)
        try:
            db.add(vehicle)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to create vehicle %r: %s", kennzeichen, str(e))
            raise database_error(e, "Could not create the vehicle.")
        logger.info("Vehicle %s created", vehicle.id)
        return vehicle

    # ── Tours ─────────────────────────────────────────────────────────────

    async def create_tour(self, db: AsyncSession, data: TourCreate) -> Tuple[Tour, List[Stop]]:
        """
        Insert a tour and, optionally, its initial stops.

        No (driver, date) uniqueness check is made. An unknown driver or
        vehicle is reported by the store's foreign-key check and surfaces
        as DatabaseError.

        Returns:
            (tour, stops in sequence order)
        """
        tour = Tour(
            fahrer_id=data.fahrer_id,
            fahrzeug_id=data.fahrzeug_id,
            datum=data.datum,
            bemerkung=data.bemerkung,
        )
        try:
            db.add(tour)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to create tour for driver %s on %s: %s",
                data.fahrer_id, data.datum, str(e),
            )
            raise database_error(
                e,
                "Could not create the tour.",
                fahrer_id=data.fahrer_id,
                fahrzeug_id=data.fahrzeug_id,
            )

        for stop_data in data.stopps:
            await stop_service.create_stop(db, tour.id, stop_data)

        stops = await stop_service.list_stops(db, tour.id) if data.stopps else []
        logger.info(
            "Tour %s created for driver %s on %s with %d stops",
            tour.id, tour.fahrer_id, tour.datum, len(stops),
        )
        return tour, stops

    async def find_tour(self, db: AsyncSession, driver_id: int, tour_date: date):
        """Oldest tour of the driver on that date, or None."""
        result = await db.execute(
            select(Tour)
            .where(Tour.fahrer_id == driver_id, Tour.datum == tour_date)
            .order_by(Tour.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_tour_for_driver(
        self, db: AsyncSession, driver_id: int, tour_date: date
    ) -> TourWithStops:
        """
        The driver's tour for the date with its stops in sequence order.

        Returns:
            TourWithStops; tour=None and stopps=[] when there is none.
        """
        try:
            tour = await self.find_tour(db, driver_id, tour_date)
            if tour is None:
                return TourWithStops(tour=None, stopps=[])
            stops = await stop_service.list_stops(db, tour.id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching tour for %s/%s: %s", driver_id, tour_date, str(e))
            raise database_error(e, "Could not load the tour.", fahrer_id=driver_id)

        return TourWithStops(
            tour=TourResponse.model_validate(tour),
            stopps=[StopResponse.model_validate(s) for s in stops],
        )

    async def delete_tour(self, db: AsyncSession, tour_id: int) -> None:
        """Delete a tour; its stops go with it (ON DELETE CASCADE)."""
        try:
            result = await db.execute(delete(Tour).where(Tour.id == tour_id))
        except SQLAlchemyError as e:
            raise database_error(e, "Could not delete the tour.", tour_id=tour_id)
        if result.rowcount == 0:
            raise NotFoundError(resource="tour", resource_id=tour_id)
        logger.info("Tour %s deleted", tour_id)


# ── Singleton Instance ────────────────────────────────────────────────────
tour_service = TourService()
