"""
Unit tests for owner JWT authentication.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest
from fastapi import HTTPException

from slidetrack.infra.auth.jwt_auth import JWTAuth
from slidetrack.infra.config.settings import Settings

SECRET = "unit-test-secret-key-with-at-least-32-bytes"


@pytest.fixture
def auth():
    return JWTAuth(Settings(JWT_SECRET_KEY=SECRET, JWT_EXPIRATION_MINUTES=5))


class TestJWTAuth:
    def test_round_trip(self, auth):
        user_id = uuid4()
        token = auth.create_access_token(user_id)
        assert auth.extract_user_id_from_token(token) == user_id

    def test_wrong_signature(self, auth):
        other = JWTAuth(Settings(JWT_SECRET_KEY="another-secret-key-of-similar-length!!"))
        token = other.create_access_token(uuid4())
        with pytest.raises(HTTPException) as exc:
            auth.verify_token(token)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid token signature"

    def test_expired(self, auth):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {
                "user_id": str(uuid4()),
                "iat": int(past.timestamp()),
                "exp": int((past + timedelta(minutes=5)).timestamp()),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(HTTPException) as exc:
            auth.verify_token(token)
        assert exc.value.detail == "Token has expired"

    def test_missing_claim(self, auth):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iat": int(now.timestamp()), "exp": int((now + timedelta(minutes=5)).timestamp())},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(HTTPException) as exc:
            auth.verify_token(token)
        assert "user_id" in exc.value.detail

    def test_garbage_token(self, auth):
        with pytest.raises(HTTPException) as exc:
            auth.verify_token("not-a-jwt")
        assert exc.value.status_code == 401

    def test_non_uuid_user_id(self, auth):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "user_id": "bob",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
            },
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(HTTPException) as exc:
            auth.extract_user_id_from_token(token)
        assert exc.value.detail == "Invalid user ID format in token"
