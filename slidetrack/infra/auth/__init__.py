"""Authentication infrastructure package."""

from .jwt_auth import JWTAuth, JWTPayload, get_jwt_auth

__all__ = ["JWTAuth", "JWTPayload", "get_jwt_auth"]
