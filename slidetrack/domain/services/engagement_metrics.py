"""
Domain service for engagement metrics.

Pure functions over already-loaded aggregates. Nothing here touches storage,
so every rule about defaults and tie-breaking lives in one testable place.
"""

import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Sequence

from slidetrack.domain.clock import ensure_utc

DEFAULT_WINDOW_DAYS = 30
DEFAULT_MOST_VIEWED_SLIDE = 1


@dataclass(frozen=True)
class SlideStats:
    """Per-slide tally built from the navigation event log."""

    slide_number: int
    views: int
    total_time: int
    unique_sessions: int = 0

    @property
    def average_time(self) -> float:
        return self.total_time / self.views if self.views else 0.0


@dataclass(frozen=True)
class DailyViews:
    day: date
    views: int


class EngagementMetricsService:
    """
    Domain service computing the deck dashboard numbers.

    All methods are total: empty input yields the documented default, never
    an error, since "no views yet" is a normal state for a deck.
    """

    @staticmethod
    def round_seconds(value: float) -> int:
        """Round half up to a whole second (2.5 -> 3)."""
        return int(math.floor(value + 0.5))

    @staticmethod
    def average_time_spent(total_time_spent: int, total_viewers: int) -> int:
        """
        Business rule: mean cumulative time per viewer, whole seconds.

        Returns 0 when the deck has no viewers.
        """
        if total_viewers <= 0:
            return 0
        return EngagementMetricsService.round_seconds(total_time_spent / total_viewers)

    @staticmethod
    def most_viewed_slide(stats: Sequence[SlideStats]) -> int:
        """
        Business rule: slide with the most views; ties go to the lowest slide
        number. Slide 1 when nothing has been viewed.
        """
        if not stats:
            return DEFAULT_MOST_VIEWED_SLIDE
        best = min(stats, key=lambda s: (-s.views, s.slide_number))
        return best.slide_number

    @staticmethod
    def drop_off_slide(stats: Sequence[SlideStats], total_pages: int) -> int:
        """
        Business rule: the least-viewed slide among slides with at least one
        view, ties to the lowest slide number.

        With fewer than two viewed slides there is nothing to compare, so the
        deck's last page is reported.
        """
        viewed = [s for s in stats if s.views > 0]
        if len(viewed) < 2:
            return total_pages
        worst = min(viewed, key=lambda s: (s.views, s.slide_number))
        return worst.slide_number

    @staticmethod
    def engagement_rate(most_viewed_slide: int, total_pages: int) -> int:
        """
        Dashboard engagement percentage: how far into the deck the most-viewed
        slide sits, as a whole percent of the page count.

        Slide numbers are recorded unchecked, so the result is clamped to
        0..100 for slides outside the deck.
        """
        if total_pages <= 0:
            return 0
        rate = EngagementMetricsService.round_seconds(most_viewed_slide / total_pages * 100)
        return min(max(rate, 0), 100)

    @staticmethod
    def views_over_time(
        session_starts: Iterable[datetime],
        now: datetime,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> List[DailyViews]:
        """
        Business rule: sessions started per UTC calendar day over the trailing
        window, ascending by day.

        The series is sparse: days without sessions are omitted, callers that
        chart a dense series zero-fill from the window themselves.
        """
        since = ensure_utc(now) - timedelta(days=window_days)
        counts: Counter = Counter()
        for started_at in session_starts:
            started_at = ensure_utc(started_at)
            if started_at is None or started_at < since:
                continue
            counts[started_at.date()] += 1
        return [DailyViews(day=d, views=counts[d]) for d in sorted(counts)]

    @staticmethod
    def sorted_stats(stats: Iterable[SlideStats]) -> List[SlideStats]:
        return sorted(stats, key=lambda s: s.slide_number)
