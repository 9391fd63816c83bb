"""
Deck management schemas for the owner API.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from slidetrack.domain.entities import Deck


class CreateDeckRequest(BaseModel):
    """Metadata for a deck whose PDF has already been processed."""

    title: str = Field(..., min_length=1, max_length=200)
    total_pages: int = Field(..., ge=1, description="Page count reported by the PDF pipeline")
    file_name: Optional[str] = Field(None, max_length=255)
    file_size: Optional[int] = Field(None, ge=0, description="Size of the source file in bytes")


class UpdateDeckRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    is_active: Optional[bool] = Field(None, description="Enable or disable the share link")


class DeckOut(BaseModel):
    id: UUID
    title: str
    total_pages: int
    is_active: bool
    public_token: str
    share_url: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, deck: Deck, share_url: str) -> "DeckOut":
        return cls(
            id=deck.id,
            title=deck.title,
            total_pages=deck.total_pages,
            is_active=deck.is_active,
            public_token=deck.public_token,
            share_url=share_url,
            file_name=deck.file_name,
            file_size=deck.file_size,
            created_at=deck.created_at,
            updated_at=deck.updated_at,
        )


class DeckListResponse(BaseModel):
    items: List[DeckOut]
    total: int = Field(..., ge=0)


class PublicDeckOut(BaseModel):
    """What a recipient sees before identifying themselves."""

    id: UUID
    title: str
    total_pages: int

    @classmethod
    def from_entity(cls, deck: Deck) -> "PublicDeckOut":
        return cls(id=deck.id, title=deck.title, total_pages=deck.total_pages)
