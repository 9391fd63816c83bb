"""
Domain entities.
"""

from .deck import Deck
from .slide_navigation import SlideNavigationEvent
from .viewer import Viewer
from .viewing_session import ViewingSession

__all__ = ["Deck", "Viewer", "ViewingSession", "SlideNavigationEvent"]
