"""
Tourenplan Backend — Photo Service (Attach/Remove Orchestrator)
=================================================================

What:  Attaches delivery photos to stops and removes them again.
Why:   Coordinates the stop lookup, the naming policy, the file write and
       the row update for POST /upload-photo/{stopId}.
How:   Composes photo_naming, FileService and the request's AsyncSession.

Attach Flow:
    ┌───────────┐   ┌──────────────┐   ┌─────────────┐   ┌─────────────┐   ┌────────────┐
    │ Payload?  │──▶│ Stop + tour  │──▶│ Derive name │──▶│ Write file  │──▶│ foto_url   │
    │ (no file) │   │ (not found)  │   │ (pure)      │   │ (overwrite) │   │ row update │
    └───────────┘   └──────────────┘   └─────────────┘   └─────────────┘   └────────────┘

    There is no compensating rollback across the last two steps: if the
    row update fails after the write, the file stays on disk. Likewise a
    later upload with a different content type leaves the old file behind.

Shared Names:
    Two stops with the same customer on the same tour date resolve to the
    same file name, so they share one photo file.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.exceptions import NotFoundError, database_error
from tourenplan.models.stop import Stop
from tourenplan.models.tour import Tour
from tourenplan.services.file_service import FileService, file_service
from tourenplan.services.photo_naming import photo_filename

logger = logging.getLogger(__name__)


class PhotoService:
    """Photo attachment workflow for stops."""

    def __init__(self, files: Optional[FileService] = None):
        self.files = files or file_service

    async def _stop_with_date(self, db: AsyncSession, stop_id: int):
        """The stop joined to its tour's date, or NotFoundError."""
        result = await db.execute(
            select(Stop, Tour.datum)
            .join(Tour, Stop.tour_id == Tour.id)
            .where(Stop.id == stop_id)
        )
        row = result.first()
        if row is None:
            raise NotFoundError(resource="stop", resource_id=stop_id)
        return row[0], row[1]

    async def attach_photo(
        self,
        db: AsyncSession,
        stop_id: int,
        content: Optional[bytes],
        content_type: Optional[str],
    ) -> Tuple[Stop, str]:
        """
        Store the photo under its derived name and point the stop at it.

        Args:
            content: Raw image bytes (None/empty means no file was sent)
            content_type: Declared MIME type, selects the extension

        Returns:
            (updated stop, derived filename)

        Raises:
            ValidationError: no payload, or payload above the size limit
            NotFoundError: stop (or its tour) does not exist
            FileStorageError: write failed
            DatabaseError: row update failed (file already written)
        """
        self.files.validate_content(content)

        stop, tour_date = await self._stop_with_date(db, stop_id)
        filename = photo_filename(stop.kunde, tour_date, content_type)

        await self.files.store_file(filename, content)

        stop.foto_url = self.files.public_url(filename)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Photo %s written but stop %s could not be updated: %s",
                filename, stop_id, str(e),
            )
            raise database_error(e, "Photo saved but the stop could not be updated.", stop_id=stop_id)

        logger.info("Photo %s attached to stop %s", filename, stop_id)
        return stop, filename

    async def remove_photo(self, db: AsyncSession, stop_id: int) -> Stop:
        """
        Delete the stop's current photo file and clear foto_url.

        A stop without a photo is returned unchanged. The file stays on
        disk while another stop still points at the same URL (same
        customer on the same date, see "Shared Names").
        """
        stop = await db.get(Stop, stop_id)
        if stop is None:
            raise NotFoundError(resource="stop", resource_id=stop_id)

        foto_url = stop.foto_url
        filename = self.files.filename_from_url(foto_url)
        try:
            shared_by = await self._stops_sharing(db, foto_url, stop_id) if filename else 0
        except SQLAlchemyError as e:
            raise database_error(e, "Could not check photo references.", stop_id=stop_id)

        if filename and shared_by == 0:
            await self.files.delete_file(filename)
        elif filename:
            logger.info("Photo %s kept, still used by %d other stop(s)", filename, shared_by)

        stop.foto_url = None
        try:
            await db.flush()
        except SQLAlchemyError as e:
            raise database_error(e, "Could not update the stop.", stop_id=stop_id)

        logger.info("Photo removed from stop %s", stop_id)
        return stop

    async def _stops_sharing(self, db: AsyncSession, foto_url: str, stop_id: int) -> int:
        """Number of other stops whose foto_url equals `foto_url`."""
        result = await db.execute(
            select(func.count())
            .select_from(Stop)
            .where(Stop.foto_url == foto_url, Stop.id != stop_id)
        )
        return result.scalar_one()


# ── Singleton Instance ────────────────────────────────────────────────────
photo_service = PhotoService()
