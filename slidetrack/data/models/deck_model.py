"""
SQLAlchemy model for Deck entity.
"""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Uuid

from slidetrack.data.models.base import Base


class DeckModel(Base):
    __tablename__ = "decks"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
    total_pages = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    public_token = Column(String(64), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_decks_owner_created", "owner_id", "created_at"),
        Index("ix_decks_token_active", "public_token", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<DeckModel(id={self.id}, title='{self.title}', active={self.is_active})>"
