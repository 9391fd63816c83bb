"""
Slide navigation event: an immutable fact in the append-only event log.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class SlideNavigationEvent:
    """
    A move to ``slide_number`` with the dwell time spent on the slide left behind.

    ``session_id`` is None for an unlinked event (tracking arrived before a
    session existed). Session-scoped aggregates skip unlinked events; slide
    view tallies still count them.
    """

    viewer_id: UUID
    deck_id: UUID
    slide_number: int
    viewed_at: datetime
    time_spent: int = 0
    session_id: Optional[UUID] = None
    id: Optional[int] = None

    @property
    def is_linked(self) -> bool:
        return self.session_id is not None
