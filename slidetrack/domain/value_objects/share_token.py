"""
Opaque tokens handed out to the outside world.
"""

import secrets
from uuid import uuid4

DEFAULT_SHARE_TOKEN_BYTES = 24


def generate_share_token(nbytes: int = DEFAULT_SHARE_TOKEN_BYTES) -> str:
    """Unguessable, URL-safe token for a deck's public link."""
    return secrets.token_urlsafe(nbytes)


def generate_session_token() -> str:
    return str(uuid4())
