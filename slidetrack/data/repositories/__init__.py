"""
SQLAlchemy implementations of the application storage ports.
"""

from .deck_repository import DeckRepository
from .navigation_repository import NavigationRepository
from .session_repository import SessionRepository
from .viewer_repository import ViewerRepository

__all__ = [
    "DeckRepository",
    "ViewerRepository",
    "SessionRepository",
    "NavigationRepository",
]
