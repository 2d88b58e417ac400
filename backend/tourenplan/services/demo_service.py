"""
Tourenplan Backend — Demo & Reset Utilities
=============================================

What:  POST /reset empties every table; POST /seed-demo loads a demo tour.
Why:   Operational convenience for demos and manual testing of the app.
How:   Both run inside the request's single transaction, so a failure in
       any statement rolls the whole operation back.

Seed Semantics:
    - Driver and vehicle are find-or-create by natural key (name, plate).
      The insert uses ON CONFLICT DO NOTHING against the unique
      constraints and then reads the row back, so two concurrent seeds
      cannot create duplicates.
    - The tour is NOT reused: every seed creates a new tour for today with
      the same three stops. Seeding twice yields two tours for one driver.

Reset Semantics:
    Children before parents: stopps → touren → fahrzeuge → fahrer.
    PostgreSQL uses TRUNCATE ... RESTART IDENTITY so ids start at 1 again;
    SQLite reuses max(id)+1, which is 1 on an empty table.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import delete, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.exceptions import TourenplanError, database_error
from tourenplan.models.driver import Driver
from tourenplan.models.stop import Stop
from tourenplan.models.tour import Tour
from tourenplan.models.vehicle import Vehicle
from tourenplan.schemas.tour import StopCreate, TourCreate
from tourenplan.services.tour_service import tour_service

logger = logging.getLogger(__name__)

DEMO_DRIVER_NAME = "Demo Fahrer"
DEMO_VEHICLE_PLATE = "HB-TP 100"

DEMO_STOPS = (
    StopCreate(
        adresse="Obernstraße 12, 28195 Bremen",
        lat=53.0766,
        lng=8.8057,
        reihenfolge=1,
        kunde="Bäckerei Schmidt",
        kommission="K-1001",
        telefon="0421 123456",
        hinweis="Lieferung über den Hintereingang",
    ),
    StopCreate(
        adresse="Am Wall 140, 28195 Bremen",
        lat=53.0779,
        lng=8.8098,
        reihenfolge=2,
        kunde="Müller",
        kommission="K-1002",
        telefon="0421 654321",
        hinweis="Bitte vorher anrufen",
    ),
    StopCreate(
        adresse="Schlachte 30, 28195 Bremen",
        lat=53.0742,
        lng=8.8013,
        reihenfolge=3,
        kunde="Café Übersee",
        kommission="K-1003",
    ),
)

# Reset order: children before parents
_RESET_TABLES = (Stop, Tour, Vehicle, Driver)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _dialect_name(db: AsyncSession) -> str:
    return db.bind.dialect.name


class DemoService:
    """Reset and seed operations."""

    async def reset(self, db: AsyncSession) -> None:
        """Destructively empty stops, tours, vehicles and drivers."""
        try:
            if _dialect_name(db) == "postgresql":
                tables = ", ".join(model.__tablename__ for model in _RESET_TABLES)
                await db.execute(text(f"TRUNCATE {tables} RESTART IDENTITY CASCADE"))
            else:
                for model in _RESET_TABLES:
                    await db.execute(delete(model))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Reset failed: %s", str(e))
            raise database_error(e, "Reset failed.")
        logger.warning("All tours, stops, vehicles and drivers deleted")

    async def _find_or_create(self, db: AsyncSession, model, column, value):
        """
        Upsert-then-read keyed by a unique column.

        Dialects without ON CONFLICT support fall back to read-then-insert.
        """
        insert = _UPSERT_DIALECTS.get(_dialect_name(db))
        if insert is not None:
            await db.execute(
                insert(model)
                .values({column.key: value})
                .on_conflict_do_nothing(index_elements=[column.key])
            )
        else:
            existing = await db.execute(select(model).where(column == value))
            if existing.scalar_one_or_none() is None:
                db.add(model(**{column.key: value}))
                await db.flush()

        result = await db.execute(select(model).where(column == value))
        return result.scalar_one()

    async def seed(
        self, db: AsyncSession, tour_date: Optional[date] = None
    ) -> Tuple[Driver, Vehicle, Tour, List[Stop]]:
        """
        Load the demo driver, vehicle, a new tour and three stops.

        Args:
            tour_date: Date of the new tour (default: today)

        Returns:
            (driver, vehicle, tour, stops in sequence order)

        Raises:
            DatabaseError: any statement failed; nothing is kept
        """
        tour_date = tour_date or date.today()
        try:
            driver = await self._find_or_create(db, Driver, Driver.name, DEMO_DRIVER_NAME)
            vehicle = await self._find_or_create(db, Vehicle, Vehicle.kennzeichen, DEMO_VEHICLE_PLATE)
            tour, stops = await tour_service.create_tour(
                db,
                TourCreate(
                    fahrer_id=driver.id,
                    fahrzeug_id=vehicle.id,
                    datum=tour_date,
                    bemerkung="Demo-Tour",
                    stopps=list(DEMO_STOPS),
                ),
            )
        except TourenplanError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Demo seed failed, rolled back: %s", str(e))
            raise database_error(e, "Demo seed failed.")

        logger.info(
            "Demo seed: driver %s, vehicle %s, tour %s with %d stops",
            driver.id, vehicle.id, tour.id, len(stops),
        )
        return driver, vehicle, tour, stops


# ── Singleton Instance ────────────────────────────────────────────────────
demo_service = DemoService()
