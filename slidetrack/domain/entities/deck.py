"""
Deck domain entity with core business rules.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from slidetrack.domain.clock import utcnow


@dataclass
class Deck:
    id: UUID
    owner_id: UUID
    title: str
    total_pages: int
    public_token: str
    created_at: datetime
    is_active: bool = True
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    updated_at: Optional[datetime] = None

    def is_owned_by(self, owner_id: UUID) -> bool:
        return self.owner_id == owner_id

    def is_publicly_viewable(self) -> bool:
        """Business rule: only active decks answer their share link."""
        return self.is_active

    def rename(self, title: str) -> None:
        title = (title or "").strip()
        if not title:
            raise ValueError("Deck title cannot be empty")
        self.title = title
        self.updated_at = utcnow()

    def set_active(self, is_active: bool) -> None:
        """Toggle the share link; the token and historical analytics stay intact."""
        self.is_active = is_active
        self.updated_at = utcnow()
