from .deck_analytics import (
    DeckAnalytics,
    DeckAnalyticsUseCase,
    SessionDetail,
    ViewerDetail,
    ViewerDetailUseCase,
)
from .manage_deck import (
    CreateDeckUseCase,
    DeleteDeckUseCase,
    GetDeckUseCase,
    GetPublicDeckUseCase,
    ListDecksUseCase,
    UpdateDeckUseCase,
)
from .record_navigation import RecordNavigationUseCase
from .resolve_viewer import ResolveViewerUseCase, ViewerResolution
from .viewing_session import CloseSessionUseCase, OpenSessionUseCase

__all__ = [
    "ResolveViewerUseCase",
    "ViewerResolution",
    "OpenSessionUseCase",
    "CloseSessionUseCase",
    "RecordNavigationUseCase",
    "DeckAnalyticsUseCase",
    "DeckAnalytics",
    "ViewerDetailUseCase",
    "ViewerDetail",
    "SessionDetail",
    "CreateDeckUseCase",
    "ListDecksUseCase",
    "GetDeckUseCase",
    "GetPublicDeckUseCase",
    "UpdateDeckUseCase",
    "DeleteDeckUseCase",
]
