"""
API routers.
"""

from .decks import router as decks_router
from .viewer import router as viewer_router

__all__ = ["decks_router", "viewer_router"]
