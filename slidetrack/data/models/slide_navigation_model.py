"""
SQLAlchemy model for the append-only slide navigation log.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Uuid

from slidetrack.data.models.base import Base


class SlideNavigationModel(Base):
    __tablename__ = "slide_navigation_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("viewing_sessions.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
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
    slide_number = Column(Integer, nullable=False)
    viewed_at = Column(DateTime(timezone=True), nullable=False)
    time_spent = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_navigation_session_slide", "session_id", "slide_number"),
        Index("ix_navigation_deck_slide", "deck_id", "slide_number"),
        Index("ix_navigation_viewer_viewed", "viewer_id", "viewed_at"),
    )

    def __repr__(self) -> str:
        return f"<SlideNavigationModel(id={self.id}, session_id={self.session_id}, slide={self.slide_number})>"
