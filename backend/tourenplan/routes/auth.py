"""
Tourenplan Backend — Login Route
==================================

What:  POST /login exchanges the configured credentials for a bearer token.
Who:   Called by the driver app before any other request.
"""

import logging

from fastapi import APIRouter

from tourenplan.schemas.auth import LoginRequest, TokenResponse
from tourenplan.schemas.common import ErrorResponse
from tourenplan.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and obtain a bearer token",
)
async def login(body: LoginRequest) -> TokenResponse:
    token = auth_service.login(body.username, body.password)
    return TokenResponse(token=token, expires_in=auth_service.token_ttl_seconds)
