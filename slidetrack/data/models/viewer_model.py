"""
SQLAlchemy model for Viewer entity.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)

from slidetrack.data.models.base import Base


class ViewerModel(Base):
    __tablename__ = "viewers"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    deck_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email = Column(String(320), nullable=False, index=True)
    first_name = Column(String(200), nullable=True)
    last_name = Column(String(200), nullable=True)
    company = Column(String(200), nullable=True)
    first_viewed_at = Column(DateTime(timezone=True), nullable=False)
    last_viewed_at = Column(DateTime(timezone=True), nullable=False)
    total_opens = Column(Integer, nullable=False, default=1)
    total_time_spent = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("deck_id", "email", name="uq_viewer_deck_email"),
        Index("ix_viewers_deck_last_viewed", "deck_id", "last_viewed_at"),
    )

    def __repr__(self) -> str:
        return f"<ViewerModel(id={self.id}, deck_id={self.deck_id}, email='{self.email}')>"
