"""
SQLAlchemy models for viewing sessions and their visited-slide sets.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Uuid

from slidetrack.data.models.base import Base


class ViewingSessionModel(Base):
    __tablename__ = "viewing_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    viewer_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("viewers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    deck_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    session_token = Column(String(64), nullable=False, unique=True, index=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)
    user_agent = Column(String(512), nullable=True)
    ip_address = Column(String(64), nullable=True)

    __table_args__ = (
        Index("ix_sessions_viewer_started", "viewer_id", "started_at"),
        Index("ix_sessions_deck_started", "deck_id", "started_at"),
    )

    def __repr__(self) -> str:
        return f"<ViewingSessionModel(id={self.id}, viewer_id={self.viewer_id}, ended={self.ended_at is not None})>"


class SessionSlideModel(Base):
    """One row per distinct slide a session has visited (set membership)."""

    __tablename__ = "session_visited_slides"

    session_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("viewing_sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    slide_number = Column(Integer, primary_key=True)
    deck_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
