"""
Tourenplan Backend — Stop Service (Ordering & Lifecycle)
==========================================================

What:  Creates stops, returns them in tour order, and applies the
       driver-facing mutations (partial update, complete, reorder, delete).
Why:   The ordering and status rules live here, independent of HTTP.
How:   Stateless; every method receives the request's AsyncSession and
       only flushes. Commit/rollback belong to get_db_session().

Ordering Contract:
    list_stops() always sorts by (reihenfolge ASC, id ASC). Indices come
    from the caller on create and are never renumbered behind its back;
    the only bulk rewrite is reorder_stops(), which takes the complete
    permutation of the tour's stops.

Partial Update Contract:
    update_stop() changes only the supplied subset of {status, hinweis,
    telefon}. An empty subset is a ValidationError raised before any
    lookup; an unknown id is a NotFoundError. Neither touches the row.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.exceptions import (
    NotFoundError,
    StatusTransitionError,
    ValidationError,
    database_error,
)
from tourenplan.models.stop import ALLOWED_TRANSITIONS, Stop, StopStatus
from tourenplan.models.tour import Tour
from tourenplan.schemas.tour import StopCreate

logger = logging.getLogger(__name__)

# Fields a driver may change through PATCH /stopps/{id}
UPDATABLE_FIELDS = ("status", "hinweis", "telefon")


def ordered_stops_query(tour_id: int):
    """SELECT for all stops of a tour in traversal order."""
    return (
        select(Stop)
        .where(Stop.tour_id == tour_id)
        .order_by(Stop.reihenfolge.asc(), Stop.id.asc())
    )


def apply_status(stop: Stop, requested: Optional[str]) -> StopStatus:
    """
    Move `stop` to the requested status if the lifecycle allows it.

    Entering DONE stamps erledigt_am; leaving DONE clears it.

    Raises:
        ValidationError: unknown status value
        StatusTransitionError: transition not allowed from the current status
    """
    try:
        target = StopStatus.parse(requested)
    except ValueError:
        raise ValidationError(
            message=(
                f"Unknown status '{requested}'. "
                f"Allowed: {', '.join(s.value for s in StopStatus)}"
            ),
            field="status",
            context={"allowed": [s.value for s in StopStatus]},
        )

    try:
        current = StopStatus.parse(stop.status)
    except ValueError:
        # Free-text values written before statuses were validated can
        # only be reset to a known state
        current = None

    if current is not None and target not in ALLOWED_TRANSITIONS[current]:
        raise StatusTransitionError(current=current.value, requested=target.value)

    if target == StopStatus.DONE and current != StopStatus.DONE:
        stop.erledigt_am = datetime.now(timezone.utc)
    elif target != StopStatus.DONE:
        stop.erledigt_am = None

    stop.status = target.value
    return target


class StopService:
    """Business logic for stops of a tour."""

    async def get_stop(self, db: AsyncSession, stop_id: int) -> Stop:
        stop = await db.get(Stop, stop_id)
        if stop is None:
            raise NotFoundError(resource="stop", resource_id=stop_id)
        return stop

    async def list_stops(self, db: AsyncSession, tour_id: int) -> List[Stop]:
        """
        All stops of `tour_id`, ascending by sequence index.

        An unknown tour simply has no stops; callers that need to tell the
        two apart check the tour first (see list_tour_stops()).
        """
        result = await db.execute(ordered_stops_query(tour_id))
        return list(result.scalars().all())

    async def list_tour_stops(self, db: AsyncSession, tour_id: int) -> List[Stop]:
        """Like list_stops() but a missing tour is a NotFoundError."""
        if await db.get(Tour, tour_id) is None:
            raise NotFoundError(resource="tour", resource_id=tour_id)
        return await self.list_stops(db, tour_id)

    async def create_stop(self, db: AsyncSession, tour_id: int, data: StopCreate) -> Stop:
        """
        Insert one stop for `tour_id` with the caller's sequence index.

        An unknown tour surfaces as the store's foreign-key violation
        (DatabaseError), not as NotFoundError.
        """
        stop = Stop(
            tour_id=tour_id,
            adresse=data.adresse,
            lat=data.lat,
            lng=data.lng,
            reihenfolge=data.reihenfolge,
            kunde=data.kunde,
            kommission=data.kommission,
            telefon=data.telefon,
            hinweis=data.hinweis,
            status=StopStatus.PENDING.value,
        )
        try:
            db.add(stop)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to create stop for tour %s: %s", tour_id, str(e))
            raise database_error(e, "Could not create the stop.", tour_id=tour_id)

        logger.info("Stop %s created for tour %s (reihenfolge=%s)", stop.id, tour_id, stop.reihenfolge)
        return stop

    async def update_stop(self, db: AsyncSession, stop_id: int, changes: Dict[str, Any]) -> Stop:
        """
        Apply a partial update of {status, hinweis, telefon}.

        Args:
            changes: Only the fields the client sent (exclude_unset dump).

        Raises:
            ValidationError: nothing to update, or unknown status value
            StatusTransitionError: status change not allowed
            NotFoundError: no stop with this id
        """
        fields = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if not fields:
            raise ValidationError(
                message="Nothing to update. Send at least one of: status, hinweis, telefon.",
                context={"allowed": list(UPDATABLE_FIELDS)},
            )

        stop = await self.get_stop(db, stop_id)

        # Status first: a rejected transition must leave the other fields untouched
        if "status" in fields:
            apply_status(stop, fields["status"])
        if "hinweis" in fields:
            stop.hinweis = fields["hinweis"]
        if "telefon" in fields:
            stop.telefon = fields["telefon"]

        await self._flush(db, stop_id)
        logger.info("Stop %s updated: %s", stop_id, ", ".join(sorted(fields)))
        return stop

    async def complete_stop(self, db: AsyncSession, stop_id: int) -> Stop:
        """Mark the stop as delivered (status done, erledigt_am set)."""
        stop = await self.get_stop(db, stop_id)
        apply_status(stop, StopStatus.DONE.value)
        await self._flush(db, stop_id)
        logger.info("Stop %s completed", stop_id)
        return stop

    async def reorder_stops(self, db: AsyncSession, tour_id: int, stop_ids: List[int]) -> List[Stop]:
        """
        Rewrite the sequence indices of a tour to 1..n in the given order.

        `stop_ids` must contain every stop of the tour exactly once.
        All indices change in the request's transaction, so readers never
        see a half-applied order.

        Raises:
            NotFoundError: unknown tour
            ValidationError: duplicates, missing or foreign stop ids
        """
        if await db.get(Tour, tour_id) is None:
            raise NotFoundError(resource="tour", resource_id=tour_id)

        stops = await self.list_stops(db, tour_id)
        by_id = {stop.id: stop for stop in stops}

        duplicates = sorted({i for i in stop_ids if stop_ids.count(i) > 1})
        if duplicates:
            raise ValidationError(
                message="Each stop may appear only once in the new order.",
                field="stopp_ids",
                context={"duplicates": duplicates},
            )

        unknown = [i for i in stop_ids if i not in by_id]
        missing = [i for i in by_id if i not in set(stop_ids)]
        if unknown or missing:
            raise ValidationError(
                message="The new order must list exactly the stops of this tour.",
                field="stopp_ids",
                context={"unknown": unknown, "missing": missing},
            )

        for position, stop_id in enumerate(stop_ids, start=1):
            by_id[stop_id].reihenfolge = position

        await self._flush(db, tour_id)
        logger.info("Tour %s reordered (%d stops)", tour_id, len(stop_ids))
        return [by_id[i] for i in stop_ids]

    async def delete_stop(self, db: AsyncSession, stop_id: int) -> None:
        stop = await self.get_stop(db, stop_id)
        try:
            await db.delete(stop)
            await db.flush()
        except SQLAlchemyError as e:
            raise database_error(e, "Could not delete the stop.", stop_id=stop_id)
        logger.info("Stop %s deleted", stop_id)

    async def _flush(self, db: AsyncSession, ref: int) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error while saving %s: %s", ref, str(e))
            raise database_error(e, "Could not save the stop.", ref=ref)


# ── Singleton Instance ────────────────────────────────────────────────────
stop_service = StopService()
