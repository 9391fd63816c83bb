"""
API schemas, grouped by audience.

- base: error envelope
- deck: owner deck management
- viewer: public tracking endpoints
- analytics: owner dashboard
"""

from __future__ import annotations

from .base import ErrorResponse
from .deck import (
    CreateDeckRequest,
    DeckListResponse,
    DeckOut,
    PublicDeckOut,
    UpdateDeckRequest,
)
from .viewer import (
    EndSessionRequest,
    NavigationEventOut,
    SessionOut,
    StartSessionRequest,
    TrackNavigationRequest,
    ViewerAccessRequest,
    ViewerAccessResponse,
    ViewerOut,
)
from .analytics import (
    DailyViewsOut,
    DeckAnalyticsResponse,
    SessionDetailOut,
    SlideStatsOut,
    ViewerDetailResponse,
)

__all__ = [
    "ErrorResponse",
    "CreateDeckRequest",
    "UpdateDeckRequest",
    "DeckOut",
    "DeckListResponse",
    "PublicDeckOut",
    "ViewerAccessRequest",
    "ViewerAccessResponse",
    "ViewerOut",
    "StartSessionRequest",
    "SessionOut",
    "TrackNavigationRequest",
    "NavigationEventOut",
    "EndSessionRequest",
    "SlideStatsOut",
    "DailyViewsOut",
    "DeckAnalyticsResponse",
    "SessionDetailOut",
    "ViewerDetailResponse",
]
