"""
JWT bearer authentication for deck owners.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from fastapi import HTTPException, status
from pydantic import BaseModel, ValidationError

from slidetrack.infra.config.settings import Settings, get_settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTPayload(BaseModel):
    """JWT token payload structure."""

    user_id: str
    exp: int
    iat: int


class JWTAuth:
    """Issues and verifies owner access tokens."""

    def __init__(self, settings: Settings = None):
        self.settings = settings or get_settings()

    def create_access_token(self, user_id: UUID) -> str:
        """Create JWT access token for user."""
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=self.settings.jwt_expires_minutes)

        payload = {
            "user_id": str(user_id),
            "exp": int(expires_at.timestamp()),
            "iat": int(now.timestamp()),
        }

        return jwt.encode(
            payload, self.settings.jwt_secret_key, algorithm=self.settings.jwt_algorithm
        )

    def verify_token(self, token: str) -> JWTPayload:
        """Verify JWT token and return payload with strict validation."""
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_iat": True,
                    "require": ["exp", "iat", "user_id"],
                },
                leeway=timedelta(seconds=0),
            )
            return JWTPayload(**payload)

        except jwt.ExpiredSignatureError:
            raise _unauthorized("Token has expired")
        except jwt.InvalidSignatureError:
            raise _unauthorized("Invalid token signature")
        except jwt.MissingRequiredClaimError as e:
            raise _unauthorized(f"Token missing required claim: {e.claim}")
        except jwt.InvalidTokenError:
            raise _unauthorized("Invalid token format")
        except ValidationError:
            raise _unauthorized("Invalid token payload structure")

    def extract_user_id_from_token(self, token: str) -> UUID:
        """Extract user ID from JWT token with validation."""
        payload = self.verify_token(token)
        try:
            return UUID(payload.user_id)
        except ValueError:
            raise _unauthorized("Invalid user ID format in token")


def get_jwt_auth() -> JWTAuth:
    """Get JWT authentication instance."""
    return JWTAuth()
