"""
Use Case: Record Navigation

Logs one slide change. The dwell time carried by the event belongs to the
slide being left and is added to the viewer's running total.
"""

from typing import Optional
from uuid import UUID

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.domain.clock import Clock, utcnow
from slidetrack.domain.entities.slide_navigation import SlideNavigationEvent
from slidetrack.domain.exceptions import (
    InvalidInputError,
    SessionClosedError,
    SessionNotFoundError,
    ViewerNotFoundError,
)
from slidetrack.domain.validators.tracking_validators import TrackingValidators
from slidetrack.infra.config.logging_config import bind_tracking_context, get_logger


class RecordNavigationUseCase:
    """
    Append a navigation event and fold it into the running aggregates.

    Each of the writes is a single statement (counter increment, set insert,
    event append); concurrent calls for the same viewer or session never lose
    an update.
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow):
        self.uow = uow
        self.clock = clock
        self._log = get_logger("usecase.record_navigation")

    async def execute(
        self,
        session_id: Optional[UUID],
        viewer_id: UUID,
        deck_id: UUID,
        slide_number: int,
        time_spent: Optional[int] = 0,
    ) -> SlideNavigationEvent:
        TrackingValidators.require(deck_id, "deck_id")
        TrackingValidators.require(viewer_id, "viewer_id")
        slide_number = TrackingValidators.validate_slide_number(slide_number)
        seconds = TrackingValidators.validate_seconds(time_spent, "time_spent")

        bind_tracking_context(deck_id=deck_id, viewer_id=viewer_id, session_id=session_id)

        async with self.uow:
            if session_id is not None:
                session = await self.uow.session_repo.get_by_id(
                    session_id, for_update=True
                )
                if not session:
                    raise SessionNotFoundError(session_id)
                if session.deck_id != deck_id or session.viewer_id != viewer_id:
                    raise InvalidInputError(
                        f"Session {session_id} does not belong to this deck and viewer"
                    )
                if not session.accepts_navigation():
                    raise SessionClosedError(session_id)

            # The counter update doubles as the viewer existence check
            if not await self.uow.viewer_repo.add_time_spent(viewer_id, deck_id, seconds):
                raise ViewerNotFoundError(viewer_id)

            event = await self.uow.navigation_repo.append(
                SlideNavigationEvent(
                    session_id=session_id,
                    viewer_id=viewer_id,
                    deck_id=deck_id,
                    slide_number=slide_number,
                    viewed_at=self.clock(),
                    time_spent=seconds,
                )
            )

            if session_id is not None:
                await self.uow.session_repo.add_visited_slide(
                    session_id, deck_id, slide_number
                )

            await self.uow.commit()

        self._log.info(
            "navigation.record.success",
            slide_number=slide_number,
            time_spent=seconds,
            linked=event.is_linked,
        )
        return event
