"""
SQLAlchemy models. Importing this package registers every table on Base.metadata.
"""

from .base import Base
from .deck_model import DeckModel
from .slide_navigation_model import SlideNavigationModel
from .viewer_model import ViewerModel
from .viewing_session_model import SessionSlideModel, ViewingSessionModel

__all__ = [
    "Base",
    "DeckModel",
    "ViewerModel",
    "ViewingSessionModel",
    "SessionSlideModel",
    "SlideNavigationModel",
]
