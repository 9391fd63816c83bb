"""
Use Cases: Deck Analytics / Viewer Detail

Read-only aggregation over the tracking data of one deck. Both use cases are
safe to call on a deck that has never been viewed; every metric falls back to
its default.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.domain.clock import Clock, utcnow
from slidetrack.domain.entities import Deck, SlideNavigationEvent, Viewer, ViewingSession
from slidetrack.domain.exceptions import DeckNotFoundError, ViewerNotFoundError
from slidetrack.domain.services.engagement_metrics import (
    DEFAULT_WINDOW_DAYS,
    DailyViews,
    EngagementMetricsService,
    SlideStats,
)
from slidetrack.infra.config.logging_config import get_logger

DEFAULT_RECENT_VIEWERS = 10


@dataclass
class DeckAnalytics:
    deck: Deck
    total_viewers: int
    total_opens: int
    total_sessions: int
    average_time_spent: int
    engagement_rate: int
    most_viewed_slide: int
    drop_off_slide: int
    slide_stats: List[SlideStats] = field(default_factory=list)
    views_over_time: List[DailyViews] = field(default_factory=list)
    viewers: List[Viewer] = field(default_factory=list)
    recent_viewers: List[Viewer] = field(default_factory=list)


@dataclass
class SessionDetail:
    session: ViewingSession
    events: List[SlideNavigationEvent] = field(default_factory=list)


@dataclass
class ViewerDetail:
    viewer: Viewer
    sessions: List[SessionDetail] = field(default_factory=list)
    unlinked_events: List[SlideNavigationEvent] = field(default_factory=list)


async def _load_owned_deck(uow: UnitOfWork, deck_id: UUID, owner_id: Optional[UUID]) -> Deck:
    deck = await uow.deck_repo.get_by_id(deck_id)
    # A foreign deck reads as missing
    if not deck or (owner_id is not None and not deck.is_owned_by(owner_id)):
        raise DeckNotFoundError(deck_id)
    return deck


class DeckAnalyticsUseCase:
    """
    Use case building the owner dashboard for one deck.

    Combines viewer totals, per-slide tallies from the event log and the
    session time series; the metric rules live in EngagementMetricsService.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock = utcnow,
        window_days: int = DEFAULT_WINDOW_DAYS,
        recent_limit: int = DEFAULT_RECENT_VIEWERS,
    ):
        self.uow = uow
        self.clock = clock
        self.window_days = window_days
        self.recent_limit = recent_limit
        self.metrics = EngagementMetricsService()
        self._log = get_logger("usecase.deck_analytics")

    async def execute(self, deck_id: UUID, owner_id: Optional[UUID] = None) -> DeckAnalytics:
        self._log.info("analytics.start", deck_id=str(deck_id))

        async with self.uow:
            deck = await _load_owned_deck(self.uow, deck_id, owner_id)

            total_viewers, total_opens, total_time = await self.uow.viewer_repo.totals(deck_id)
            viewers = await self.uow.viewer_repo.list_by_deck(deck_id)
            recent = await self.uow.viewer_repo.list_recent(deck_id, self.recent_limit)
            total_sessions = await self.uow.session_repo.count_by_deck(deck_id)
            stats = self.metrics.sorted_stats(
                await self.uow.navigation_repo.slide_stats(deck_id)
            )

            now = self.clock()
            starts = await self.uow.session_repo.list_start_times(
                deck_id, now - timedelta(days=self.window_days)
            )

        most_viewed = self.metrics.most_viewed_slide(stats)
        analytics = DeckAnalytics(
            deck=deck,
            total_viewers=total_viewers,
            total_opens=total_opens,
            total_sessions=total_sessions,
            average_time_spent=self.metrics.average_time_spent(total_time, total_viewers),
            engagement_rate=self.metrics.engagement_rate(most_viewed, deck.total_pages),
            most_viewed_slide=most_viewed,
            drop_off_slide=self.metrics.drop_off_slide(stats, deck.total_pages),
            slide_stats=stats,
            views_over_time=self.metrics.views_over_time(starts, now, self.window_days),
            viewers=viewers,
            recent_viewers=recent,
        )

        self._log.info(
            "analytics.success",
            deck_id=str(deck_id),
            total_viewers=total_viewers,
            slides_viewed=len(stats),
        )
        return analytics


class ViewerDetailUseCase:
    """Use case for the per-viewer drill-down: sessions and their slide paths."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._log = get_logger("usecase.viewer_detail")

    async def execute(
        self, deck_id: UUID, viewer_id: UUID, owner_id: Optional[UUID] = None
    ) -> ViewerDetail:
        async with self.uow:
            await _load_owned_deck(self.uow, deck_id, owner_id)

            viewer = await self.uow.viewer_repo.get_by_id(viewer_id)
            if not viewer or viewer.deck_id != deck_id:
                raise ViewerNotFoundError(viewer_id)

            sessions = await self.uow.session_repo.list_by_viewer(deck_id, viewer_id)
            events = await self.uow.navigation_repo.list_by_sessions(
                [s.id for s in sessions]
            )
            unlinked = await self.uow.navigation_repo.list_unlinked_by_viewer(
                deck_id, viewer_id
            )

        by_session = {s.id: SessionDetail(session=s) for s in sessions}
        for event in events:
            by_session[event.session_id].events.append(event)

        self._log.info(
            "viewer_detail.success",
            deck_id=str(deck_id),
            viewer_id=str(viewer_id),
            sessions=len(sessions),
            events=len(events),
        )
        return ViewerDetail(
            viewer=viewer,
            sessions=[by_session[s.id] for s in sessions],
            unlinked_events=unlinked,
        )
