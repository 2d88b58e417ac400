"""
Shared route dependencies.

require_auth is attached at router level, so every endpoint of a protected
router rejects requests without a valid bearer token before its handler runs.
"""

from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tourenplan.services.auth_service import auth_service

# auto_error=False: a missing header reaches require_auth, which answers
# with our 401 error body instead of FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


async def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """Verified token claims of the caller; raises AuthenticationError otherwise."""
    token = credentials.credentials if credentials else None
    return auth_service.verify_token(token)
