"""
Application ports - abstract interfaces for the storage collaborator.

These interfaces define the contracts that the tracking engine needs from
persistence. Counter and set mutations are expressed as single atomic
operations so concurrent requests for the same viewer or session cannot lose
updates.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from slidetrack.domain.entities import (
    Deck,
    SlideNavigationEvent,
    Viewer,
    ViewingSession,
)
from slidetrack.domain.services.engagement_metrics import SlideStats


class DeckRepositoryPort(ABC):
    """Abstract repository interface for Deck operations."""

    @abstractmethod
    async def create(self, deck: Deck) -> Deck:
        """Create a new deck."""

    @abstractmethod
    async def get_by_id(self, deck_id: UUID) -> Optional[Deck]:
        """Get deck by ID."""

    @abstractmethod
    async def get_by_token(self, public_token: str) -> Optional[Deck]:
        """Get deck by its share token, regardless of active flag."""

    @abstractmethod
    async def list_by_owner(self, owner_id: UUID) -> List[Deck]:
        """Owner's decks, newest first."""

    @abstractmethod
    async def update(self, deck: Deck) -> Deck:
        """Persist title / active flag changes. The share token is never written."""

    @abstractmethod
    async def delete(self, deck_id: UUID) -> bool:
        """Delete the deck row only."""


class ViewerRepositoryPort(ABC):
    """Abstract repository interface for Viewer operations."""

    @abstractmethod
    async def create(self, viewer: Viewer) -> Viewer:
        """Insert a viewer; raises ConflictError on a duplicate (deck_id, email)."""

    @abstractmethod
    async def get_by_id(self, viewer_id: UUID) -> Optional[Viewer]:
        """Get viewer by ID."""

    @abstractmethod
    async def get_by_deck_and_email(self, deck_id: UUID, email: str) -> Optional[Viewer]:
        """Look up a viewer by its identity key."""

    @abstractmethod
    async def record_open(
        self, viewer_id: UUID, opened_at: datetime, profile: Dict[str, str]
    ) -> Optional[Viewer]:
        """Atomically bump total_opens, set last_viewed_at, merge profile fields."""

    @abstractmethod
    async def add_time_spent(self, viewer_id: UUID, deck_id: UUID, seconds: int) -> bool:
        """Atomic increment of total_time_spent. False when no such viewer."""

    @abstractmethod
    async def list_by_deck(self, deck_id: UUID) -> List[Viewer]:
        """All viewers of a deck, most recently seen first."""

    @abstractmethod
    async def list_recent(self, deck_id: UUID, limit: int) -> List[Viewer]:
        """Most recently seen viewers of a deck."""

    @abstractmethod
    async def totals(self, deck_id: UUID) -> Tuple[int, int, int]:
        """(viewer count, sum of opens, sum of time spent) for a deck."""

    @abstractmethod
    async def delete_by_deck(self, deck_id: UUID) -> int:
        """Delete every viewer of a deck."""


class SessionRepositoryPort(ABC):
    """Abstract repository interface for ViewingSession operations."""

    @abstractmethod
    async def create(self, session: ViewingSession) -> ViewingSession:
        """Insert a new open session."""

    @abstractmethod
    async def get_by_id(
        self, session_id: UUID, for_update: bool = False
    ) -> Optional[ViewingSession]:
        """
        Get session (with its visited-slide set) by ID.

        ``for_update`` locks the row until the transaction ends, so a close
        cannot commit between the open check and the writes that follow it.
        """

    @abstractmethod
    async def close(self, session_id: UUID, ended_at: datetime, duration: int) -> bool:
        """Set end time and duration. False when no such session."""

    @abstractmethod
    async def add_visited_slide(
        self, session_id: UUID, deck_id: UUID, slide_number: int
    ) -> None:
        """Atomic set-add; re-adding a slide is a no-op."""

    @abstractmethod
    async def list_by_viewer(self, deck_id: UUID, viewer_id: UUID) -> List[ViewingSession]:
        """A viewer's sessions on a deck, most recent first."""

    @abstractmethod
    async def list_start_times(self, deck_id: UUID, since: datetime) -> List[datetime]:
        """Start times of the deck's sessions started at or after ``since``."""

    @abstractmethod
    async def count_by_deck(self, deck_id: UUID) -> int:
        """Number of sessions ever opened on a deck."""

    @abstractmethod
    async def delete_by_deck(self, deck_id: UUID) -> int:
        """Delete every session (and visited-slide row) of a deck."""


class NavigationRepositoryPort(ABC):
    """Abstract repository interface for the navigation event log."""

    @abstractmethod
    async def append(self, event: SlideNavigationEvent) -> SlideNavigationEvent:
        """Append an immutable event; returns it with its assigned id."""

    @abstractmethod
    async def slide_stats(self, deck_id: UUID) -> List[SlideStats]:
        """Per-slide views, total dwell time and distinct linked sessions."""

    @abstractmethod
    async def list_by_sessions(
        self, session_ids: Sequence[UUID]
    ) -> List[SlideNavigationEvent]:
        """Events of the given sessions, ascending by time."""

    @abstractmethod
    async def list_unlinked_by_viewer(
        self, deck_id: UUID, viewer_id: UUID
    ) -> List[SlideNavigationEvent]:
        """A viewer's events that never got a session, ascending by time."""

    @abstractmethod
    async def delete_by_deck(self, deck_id: UUID) -> int:
        """Delete every event of a deck."""
