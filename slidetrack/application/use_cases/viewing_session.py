"""
Use Cases: Open / Close Viewing Session

A session is one continuous viewing of a deck by one viewer. It starts open,
collects navigation, and is closed once with the client-measured duration.
"""

from typing import Optional
from uuid import UUID, uuid4

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.domain.clock import Clock, utcnow
from slidetrack.domain.entities.slide_navigation import SlideNavigationEvent
from slidetrack.domain.entities.viewing_session import ViewingSession
from slidetrack.domain.exceptions import (
    DeckInactiveError,
    DeckNotFoundError,
    SessionNotFoundError,
    ViewerNotFoundError,
)
from slidetrack.domain.validators.tracking_validators import TrackingValidators
from slidetrack.domain.value_objects.share_token import generate_session_token
from slidetrack.infra.config.logging_config import bind_tracking_context, get_logger

FIRST_SLIDE = 1


class OpenSessionUseCase:
    """
    Start a new session for a resolved viewer.

    Every call creates a fresh session; reopening a deck never resumes an old
    one. The first slide is logged as viewed on open unless ``initial_slide``
    is None.
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow):
        self.uow = uow
        self.clock = clock
        self._log = get_logger("usecase.open_session")

    async def execute(
        self,
        viewer_id: UUID,
        deck_id: UUID,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        initial_slide: Optional[int] = FIRST_SLIDE,
    ) -> ViewingSession:
        TrackingValidators.require(viewer_id, "viewer_id")
        TrackingValidators.require(deck_id, "deck_id")
        if initial_slide is not None:
            TrackingValidators.validate_slide_number(initial_slide)

        bind_tracking_context(deck_id=deck_id, viewer_id=viewer_id)
        self._log.info("session.open.start")

        async with self.uow:
            deck = await self.uow.deck_repo.get_by_id(deck_id)
            if not deck:
                raise DeckNotFoundError(deck_id)
            if not deck.is_publicly_viewable():
                raise DeckInactiveError(deck_id)

            viewer = await self.uow.viewer_repo.get_by_id(viewer_id)
            if not viewer or viewer.deck_id != deck_id:
                raise ViewerNotFoundError(viewer_id)

            now = self.clock()
            session = ViewingSession(
                id=uuid4(),
                viewer_id=viewer_id,
                deck_id=deck_id,
                session_token=generate_session_token(),
                started_at=now,
                user_agent=user_agent,
                ip_address=ip_address,
            )
            await self.uow.session_repo.create(session)

            if initial_slide is not None:
                await self.uow.navigation_repo.append(
                    SlideNavigationEvent(
                        session_id=session.id,
                        viewer_id=viewer_id,
                        deck_id=deck_id,
                        slide_number=initial_slide,
                        viewed_at=now,
                        time_spent=0,
                    )
                )
                await self.uow.session_repo.add_visited_slide(
                    session.id, deck_id, initial_slide
                )
                session.visited_slides = frozenset({initial_slide})

            await self.uow.commit()

        bind_tracking_context(session_id=session.id)
        self._log.info("session.open.success", initial_slide=initial_slide)
        return session


class CloseSessionUseCase:
    """
    End a session with the duration the client measured.

    Closing twice overwrites the end time and duration; the latest report wins.
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow):
        self.uow = uow
        self.clock = clock
        self._log = get_logger("usecase.close_session")

    async def execute(self, session_id: UUID, duration: int) -> ViewingSession:
        TrackingValidators.require(session_id, "session_id")
        TrackingValidators.require(duration, "duration")
        seconds = TrackingValidators.validate_seconds(duration, "duration")

        bind_tracking_context(session_id=session_id)

        async with self.uow:
            session = await self.uow.session_repo.get_by_id(session_id)
            if not session:
                raise SessionNotFoundError(session_id)

            session.close(self.clock(), seconds)
            if not await self.uow.session_repo.close(
                session.id, session.ended_at, session.duration
            ):
                raise SessionNotFoundError(session_id)
            await self.uow.commit()

        self._log.info("session.close.success", duration=seconds)
        return session
