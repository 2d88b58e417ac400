"""
Tourenplan Backend — Photo Route Handlers
===========================================

What:  POST /upload-photo/{stopId} attaches delivery evidence to a stop;
       DELETE /stopps/{id}/foto removes it again.
Who:   Called by the driver app after a delivery.

Request Flow (upload):
    1. Client sends multipart/form-data with a 'photo' field
    2. At most the photo size limit + 1 bytes are read into memory
    3. PhotoService validates, derives the name, writes, updates foto_url
    4. Response: {success, stoppId, foto_url, filename}

The 'photo' field is optional at the schema level so that a request
without it reaches PhotoService and gets our 400 "no file" body rather
than FastAPI's 422.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.database import get_db_session
from tourenplan.routes.deps import require_auth
from tourenplan.schemas.common import ErrorResponse
from tourenplan.schemas.tour import PhotoUploadResponse, StopResponse
from tourenplan.services.photo_service import photo_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Photos"], dependencies=[Depends(require_auth)])


@router.post(
    "/upload-photo/{stop_id}",
    response_model=PhotoUploadResponse,
    responses={
        400: {"description": "No file or file too large", "model": ErrorResponse},
        404: {"description": "Stop not found", "model": ErrorResponse},
        500: {"description": "Storage or database failure", "model": ErrorResponse},
    },
    summary="Attach a delivery photo to a stop",
    description=(
        "Upload an image (max 15MB) in the 'photo' form field. The file is named "
        "after the customer and tour date; uploading again replaces the previous photo."
    ),
)
async def upload_photo(
    stop_id: int,
    photo: Optional[UploadFile] = File(default=None, description="Image file (jpeg, png, webp, heic, heif)"),
    db: AsyncSession = Depends(get_db_session),
) -> PhotoUploadResponse:
    content: Optional[bytes] = None
    content_type: Optional[str] = None

    if photo is not None:
        try:
            # One byte past the limit is enough to detect an oversized upload
            content = await photo.read(photo_service.files.max_size + 1)
            content_type = photo.content_type
        finally:
            await photo.close()

    logger.info(
        "Received photo for stop %s: %s, %d bytes",
        stop_id,
        content_type or "no content type",
        len(content or b""),
    )

    stop, filename = await photo_service.attach_photo(db, stop_id, content, content_type)
    return PhotoUploadResponse(
        success=True,
        stoppId=stop.id,
        foto_url=stop.foto_url,
        filename=filename,
    )


@router.delete(
    "/stopps/{stop_id}/foto",
    response_model=StopResponse,
    responses={404: {"description": "Stop not found", "model": ErrorResponse}},
    summary="Remove the photo of a stop",
)
async def delete_photo(
    stop_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> StopResponse:
    stop = await photo_service.remove_photo(db, stop_id)
    return StopResponse.model_validate(stop)
