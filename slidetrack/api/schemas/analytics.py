"""
Owner dashboard schemas.
"""

from __future__ import annotations

from datetime import date
from typing import List

from pydantic import BaseModel, Field

from slidetrack.api.schemas.deck import DeckOut
from slidetrack.api.schemas.viewer import NavigationEventOut, SessionOut, ViewerOut
from slidetrack.application.use_cases.deck_analytics import DeckAnalytics, ViewerDetail


class SlideStatsOut(BaseModel):
    slide_number: int
    views: int
    average_time: float = Field(..., description="Mean dwell in seconds")
    unique_sessions: int


class DailyViewsOut(BaseModel):
    day: date
    views: int


class DeckAnalyticsResponse(BaseModel):
    deck: DeckOut
    total_viewers: int
    total_opens: int
    total_sessions: int
    average_time_spent: int
    engagement_rate: int = Field(..., ge=0, le=100)
    most_viewed_slide: int
    drop_off_slide: int
    slide_stats: List[SlideStatsOut]
    views_over_time: List[DailyViewsOut]
    viewers: List[ViewerOut]
    recent_viewers: List[ViewerOut]

    @classmethod
    def from_result(cls, result: DeckAnalytics, share_url: str) -> "DeckAnalyticsResponse":
        return cls(
            deck=DeckOut.from_entity(result.deck, share_url),
            total_viewers=result.total_viewers,
            total_opens=result.total_opens,
            total_sessions=result.total_sessions,
            average_time_spent=result.average_time_spent,
            engagement_rate=result.engagement_rate,
            most_viewed_slide=result.most_viewed_slide,
            drop_off_slide=result.drop_off_slide,
            slide_stats=[
                SlideStatsOut(
                    slide_number=s.slide_number,
                    views=s.views,
                    average_time=s.average_time,
                    unique_sessions=s.unique_sessions,
                )
                for s in result.slide_stats
            ],
            views_over_time=[
                DailyViewsOut(day=d.day, views=d.views) for d in result.views_over_time
            ],
            viewers=[ViewerOut.from_entity(v) for v in result.viewers],
            recent_viewers=[ViewerOut.from_entity(v) for v in result.recent_viewers],
        )


class SessionDetailOut(BaseModel):
    session: SessionOut
    events: List[NavigationEventOut]


class ViewerDetailResponse(BaseModel):
    viewer: ViewerOut
    sessions: List[SessionDetailOut]
    unlinked_events: List[NavigationEventOut]

    @classmethod
    def from_result(cls, result: ViewerDetail) -> "ViewerDetailResponse":
        return cls(
            viewer=ViewerOut.from_entity(result.viewer),
            sessions=[
                SessionDetailOut(
                    session=SessionOut.from_entity(item.session),
                    events=[NavigationEventOut.from_entity(e) for e in item.events],
                )
                for item in result.sessions
            ],
            unlinked_events=[
                NavigationEventOut.from_entity(e) for e in result.unlinked_events
            ],
        )
