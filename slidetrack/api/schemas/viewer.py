"""
Public viewer-side tracking schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from slidetrack.api.schemas.deck import PublicDeckOut
from slidetrack.domain.entities import SlideNavigationEvent, Viewer, ViewingSession


class ViewerAccessRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Public share token of the deck")
    email: str = Field(..., min_length=3, max_length=320)
    first_name: Optional[str] = Field(None, max_length=200)
    last_name: Optional[str] = Field(None, max_length=200)
    company: Optional[str] = Field(None, max_length=200)


class ViewerOut(BaseModel):
    id: UUID
    deck_id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    display_name: str
    first_viewed_at: datetime
    last_viewed_at: datetime
    total_opens: int
    total_time_spent: int

    @classmethod
    def from_entity(cls, viewer: Viewer) -> "ViewerOut":
        return cls(
            id=viewer.id,
            deck_id=viewer.deck_id,
            email=viewer.email,
            first_name=viewer.first_name,
            last_name=viewer.last_name,
            company=viewer.company,
            display_name=viewer.display_name,
            first_viewed_at=viewer.first_viewed_at,
            last_viewed_at=viewer.last_viewed_at,
            total_opens=viewer.total_opens,
            total_time_spent=viewer.total_time_spent,
        )


class ViewerAccessResponse(BaseModel):
    viewer: ViewerOut
    deck: PublicDeckOut
    is_new: bool


class StartSessionRequest(BaseModel):
    deck_id: UUID
    viewer_id: UUID


class SessionOut(BaseModel):
    id: UUID
    session_token: str
    viewer_id: UUID
    deck_id: UUID
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration: Optional[int] = None
    visited_slides: List[int] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, session: ViewingSession) -> "SessionOut":
        return cls(
            id=session.id,
            session_token=session.session_token,
            viewer_id=session.viewer_id,
            deck_id=session.deck_id,
            started_at=session.started_at,
            ended_at=session.ended_at,
            duration=session.duration,
            visited_slides=sorted(session.visited_slides),
        )


class TrackNavigationRequest(BaseModel):
    """
    One slide change. ``time_spent`` is the dwell on the slide being left.
    Omitting ``session_id`` records an unlinked event.
    """

    session_id: Optional[UUID] = None
    viewer_id: UUID
    deck_id: UUID
    slide_number: int
    time_spent: int = Field(0, description="Seconds spent on the slide being left")


class NavigationEventOut(BaseModel):
    id: Optional[int] = None
    session_id: Optional[UUID] = None
    slide_number: int
    viewed_at: datetime
    time_spent: int

    @classmethod
    def from_entity(cls, event: SlideNavigationEvent) -> "NavigationEventOut":
        return cls(
            id=event.id,
            session_id=event.session_id,
            slide_number=event.slide_number,
            viewed_at=event.viewed_at,
            time_spent=event.time_spent,
        )


class EndSessionRequest(BaseModel):
    session_id: UUID
    duration: int = Field(..., description="Client-measured session length in seconds")
