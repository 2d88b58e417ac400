"""
Tourenplan Backend — Stop Route Handlers
==========================================

What:  Driver-side stop mutations: partial update, complete, delete.
Why:   The driver app reports progress per stop while on tour.

PATCH semantics:
    Only fields present in the JSON body are applied. `{}` is rejected
    with 400 ("nothing to update"); an unknown id with 404.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tourenplan.database import get_db_session
from tourenplan.routes.deps import require_auth
from tourenplan.schemas.common import ErrorResponse, SuccessResponse
from tourenplan.schemas.tour import StopResponse, StopUpdate
from tourenplan.services.stop_service import stop_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stopps", tags=["Stops"], dependencies=[Depends(require_auth)])


@router.patch(
    "/{stop_id}",
    response_model=StopResponse,
    responses={
        400: {"description": "Nothing to update or invalid status", "model": ErrorResponse},
        404: {"description": "Stop not found", "model": ErrorResponse},
    },
    summary="Update status, hint or phone of a stop",
)
async def update_stop(
    stop_id: int,
    body: StopUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> StopResponse:
    stop = await stop_service.update_stop(db, stop_id, body.model_dump(exclude_unset=True))
    return StopResponse.model_validate(stop)


@router.post(
    "/{stop_id}/erledigt",
    response_model=StopResponse,
    responses={
        400: {"description": "Stop cannot be completed from its status", "model": ErrorResponse},
        404: {"description": "Stop not found", "model": ErrorResponse},
    },
    summary="Mark a stop as delivered",
)
async def complete_stop(
    stop_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> StopResponse:
    stop = await stop_service.complete_stop(db, stop_id)
    return StopResponse.model_validate(stop)


@router.delete(
    "/{stop_id}",
    response_model=SuccessResponse,
    responses={404: {"description": "Stop not found", "model": ErrorResponse}},
    summary="Delete a stop",
)
async def delete_stop(
    stop_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await stop_service.delete_stop(db, stop_id)
    return SuccessResponse()
