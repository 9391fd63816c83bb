"""
Domain value objects - immutable objects defined by their values.
"""

from .email import normalize_email
from .session_state import SessionState
from .share_token import generate_share_token, generate_session_token

__all__ = [
    "SessionState",
    "normalize_email",
    "generate_share_token",
    "generate_session_token",
]
