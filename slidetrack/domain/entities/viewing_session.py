"""
Viewing session domain entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional
from uuid import UUID

from slidetrack.domain.value_objects.session_state import SessionState


@dataclass
class ViewingSession:
    id: UUID
    viewer_id: UUID
    deck_id: UUID
    session_token: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration: Optional[int] = None
    visited_slides: FrozenSet[int] = field(default_factory=frozenset)
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self.ended_at is None else SessionState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    def accepts_navigation(self) -> bool:
        return self.state.accepts_navigation()

    def close(self, ended_at: datetime, duration: int) -> None:
        """
        Business rule: closing sets end time and duration. Closing again
        overwrites both (a corrected report from a retrying client).
        """
        if duration < 0:
            raise ValueError("Session duration cannot be negative")
        self.ended_at = ended_at
        self.duration = duration
