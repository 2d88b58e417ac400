"""
Tourenplan Backend — Authentication Service
=============================================

What:  Checks the configured credential pair and issues/verifies bearer tokens.
Why:   Every endpoint except /login and /health requires a valid token.
How:   Tokens are HS256 JWTs (PyJWT) signed with JWT_SECRET and carrying
       short claims: sub (user id), role, iat, exp.

There is no user table. A single username/password from the settings is
accepted; integrating a real identity provider is out of scope.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from tourenplan.config import Settings, settings as default_settings
from tourenplan.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    @property
    def token_ttl_seconds(self) -> int:
        return self.config.token_ttl_minutes * 60

    def check_credentials(self, username: str, password: str) -> bool:
        """Constant-time comparison against the configured pair."""
        user_ok = hmac.compare_digest(username.encode(), self.config.auth_username.encode())
        password_ok = hmac.compare_digest(password.encode(), self.config.auth_password.encode())
        return user_ok and password_ok

    def create_token(self, subject: str, role: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "role": role,
            "iat": now,
            "exp": now + timedelta(seconds=self.token_ttl_seconds),
        }
        return jwt.encode(payload, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def login(self, username: str, password: str) -> str:
        """
        Returns:
            Signed token for the configured user.

        Raises:
            AuthenticationError: username or password do not match
        """
        if not self.check_credentials(username, password):
            logger.warning("Failed login attempt for user %r", username)
            raise AuthenticationError(message="Invalid username or password")
        logger.info("User %r logged in", username)
        return self.create_token(subject=username, role=self.config.auth_role)

    def verify_token(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Decode and verify a bearer token.

        Returns:
            The claims dict (contains at least sub and role).

        Raises:
            AuthenticationError: missing, malformed, expired or wrongly signed
        """
        if not token:
            raise AuthenticationError(message="Missing bearer token")
        try:
            claims = jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(message="Token has expired")
        except jwt.PyJWTError as e:
            logger.debug("Rejected token: %s", str(e))
            raise AuthenticationError(message="Invalid token")
        return claims


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
