"""
Viewer domain entity: one recipient identity scoped to one deck.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

PROFILE_FIELDS = ("first_name", "last_name", "company")


@dataclass
class Viewer:
    id: UUID
    deck_id: UUID
    email: str
    first_viewed_at: datetime
    last_viewed_at: datetime
    total_opens: int = 1
    total_time_spent: int = 0
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.email

    def profile_updates(self, **supplied: Optional[str]) -> Dict[str, str]:
        """
        Business rule: profile merges are non-destructive.

        Returns only the supplied fields that carry a non-empty value; blanks
        never overwrite what is already stored.
        """
        updates = {}
        for field in PROFILE_FIELDS:
            value = (supplied.get(field) or "").strip()
            if value:
                updates[field] = value
        return updates
