"""
Use Case: Resolve Viewer

Maps (deck, email) to exactly one viewer identity:
1. Normalising and validating the email
2. Checking the deck answers its share link
3. Counting a repeat open, or creating the viewer on first visit
"""

from typing import NamedTuple, Optional
from uuid import UUID, uuid4

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.domain.clock import Clock, utcnow
from slidetrack.domain.entities.viewer import Viewer
from slidetrack.domain.exceptions import (
    ConflictError,
    DeckInactiveError,
    DeckNotFoundError,
    ViewerNotFoundError,
)
from slidetrack.domain.validators.tracking_validators import TrackingValidators
from slidetrack.infra.config.logging_config import bind_tracking_context, get_logger


class ViewerResolution(NamedTuple):
    viewer: Viewer
    is_new: bool


class ResolveViewerUseCase:
    """
    Use case for identifying a recipient of a shared deck.

    The same normalised email on the same deck always resolves to the same
    viewer; every resolution counts as one open.
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow):
        self.uow = uow
        self.clock = clock
        self._log = get_logger("usecase.resolve_viewer")

    async def execute(
        self,
        deck_id: UUID,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        company: Optional[str] = None,
    ) -> ViewerResolution:
        TrackingValidators.require(deck_id, "deck_id")
        normalized = TrackingValidators.validate_email(email)
        supplied = {"first_name": first_name, "last_name": last_name, "company": company}
        for name, value in supplied.items():
            TrackingValidators.validate_profile_field(value, name)

        bind_tracking_context(deck_id=deck_id)
        self._log.info("viewer.resolve.start")

        async with self.uow:
            deck = await self.uow.deck_repo.get_by_id(deck_id)
            if not deck:
                raise DeckNotFoundError(deck_id)
            if not deck.is_publicly_viewable():
                raise DeckInactiveError(deck_id)

            now = self.clock()
            existing = await self.uow.viewer_repo.get_by_deck_and_email(deck_id, normalized)
            if existing:
                viewer = await self._record_repeat_open(existing, now, supplied)
                is_new = False
            else:
                candidate = Viewer(
                    id=uuid4(),
                    deck_id=deck_id,
                    email=normalized,
                    first_viewed_at=now,
                    last_viewed_at=now,
                    total_opens=1,
                    total_time_spent=0,
                    **{k: (v or "").strip() or None for k, v in supplied.items()},
                )
                try:
                    viewer = await self.uow.viewer_repo.create(candidate)
                    is_new = True
                except ConflictError:
                    # A concurrent first open of the same (deck, email) won
                    winner = await self.uow.viewer_repo.get_by_deck_and_email(
                        deck_id, normalized
                    )
                    if not winner:
                        raise
                    self._log.info("viewer.resolve.race_lost", viewer_id=str(winner.id))
                    viewer = await self._record_repeat_open(winner, now, supplied)
                    is_new = False

            await self.uow.commit()

        bind_tracking_context(viewer_id=viewer.id)
        self._log.info(
            "viewer.resolve.success", is_new=is_new, total_opens=viewer.total_opens
        )
        return ViewerResolution(viewer=viewer, is_new=is_new)

    async def _record_repeat_open(self, viewer: Viewer, now, supplied) -> Viewer:
        updates = viewer.profile_updates(**supplied)
        updated = await self.uow.viewer_repo.record_open(viewer.id, now, updates)
        if not updated:
            raise ViewerNotFoundError(viewer.id)
        return updated
