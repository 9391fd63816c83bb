"""
Viewing session repository.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Set
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.ports import SessionRepositoryPort
from slidetrack.data.models.viewing_session_model import (
    SessionSlideModel,
    ViewingSessionModel,
)
from slidetrack.data.repositories.base import conflict_guard, insert_ignore
from slidetrack.domain.clock import ensure_utc
from slidetrack.domain.entities.viewing_session import ViewingSession
from slidetrack.infra.config.logging_config import get_logger


class SessionRepository(SessionRepositoryPort):
    def __init__(self, session: AsyncSession):
        self.session = session
        self._log = get_logger("repo.session")

    async def create(self, viewing_session: ViewingSession) -> ViewingSession:
        model = ViewingSessionModel(
            id=viewing_session.id,
            viewer_id=viewing_session.viewer_id,
            deck_id=viewing_session.deck_id,
            session_token=viewing_session.session_token,
            started_at=viewing_session.started_at,
            ended_at=viewing_session.ended_at,
            duration=viewing_session.duration,
            user_agent=viewing_session.user_agent,
            ip_address=viewing_session.ip_address,
        )

        async with conflict_guard(self.session, "Session token"):
            self.session.add(model)
            await self.session.flush()

        self._log.info(
            "session.create",
            session_id=str(viewing_session.id),
            viewer_id=str(viewing_session.viewer_id),
        )
        return viewing_session

    async def get_by_id(
        self, session_id: UUID, for_update: bool = False
    ) -> Optional[ViewingSession]:
        return await self._get_one(ViewingSessionModel.id == session_id, for_update)

    async def close(self, session_id: UUID, ended_at: datetime, duration: int) -> bool:
        result = await self.session.execute(
            update(ViewingSessionModel)
            .where(ViewingSessionModel.id == session_id)
            .values(ended_at=ended_at, duration=duration)
            .execution_options(synchronize_session=False)
        )
        closed = result.rowcount > 0
        self._log.info(
            "session.close", session_id=str(session_id), duration=duration, found=closed
        )
        return closed

    async def add_visited_slide(
        self, session_id: UUID, deck_id: UUID, slide_number: int
    ) -> None:
        await insert_ignore(
            self.session,
            SessionSlideModel.__table__,
            {"session_id": session_id, "slide_number": slide_number, "deck_id": deck_id},
        )

    async def list_by_viewer(self, deck_id: UUID, viewer_id: UUID) -> List[ViewingSession]:
        result = await self.session.execute(
            select(ViewingSessionModel)
            .where(
                ViewingSessionModel.deck_id == deck_id,
                ViewingSessionModel.viewer_id == viewer_id,
            )
            .order_by(ViewingSessionModel.started_at.desc())
            .execution_options(populate_existing=True)
        )
        models = result.scalars().all()
        slides = await self._visited_slides([m.id for m in models])
        return [self._to_entity(m, slides.get(m.id, set())) for m in models]

    async def list_start_times(self, deck_id: UUID, since: datetime) -> List[datetime]:
        result = await self.session.execute(
            select(ViewingSessionModel.started_at)
            .where(
                ViewingSessionModel.deck_id == deck_id,
                ViewingSessionModel.started_at >= since,
            )
            .order_by(ViewingSessionModel.started_at)
        )
        return [ensure_utc(value) for value in result.scalars().all()]

    async def count_by_deck(self, deck_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count(ViewingSessionModel.id)).where(
                ViewingSessionModel.deck_id == deck_id
            )
        )
        return int(result.scalar_one())

    async def delete_by_deck(self, deck_id: UUID) -> int:
        await self.session.execute(
            delete(SessionSlideModel).where(SessionSlideModel.deck_id == deck_id)
        )
        result = await self.session.execute(
            delete(ViewingSessionModel).where(ViewingSessionModel.deck_id == deck_id)
        )
        self._log.info("session.delete_by_deck", deck_id=str(deck_id), count=result.rowcount)
        return result.rowcount

    async def _get_one(self, criterion, for_update: bool = False) -> Optional[ViewingSession]:
        stmt = (
            select(ViewingSessionModel)
            .where(criterion)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        slides = await self._visited_slides([model.id])
        return self._to_entity(model, slides.get(model.id, set()))

    async def _visited_slides(self, session_ids: List[UUID]) -> Dict[UUID, Set[int]]:
        if not session_ids:
            return {}
        result = await self.session.execute(
            select(SessionSlideModel.session_id, SessionSlideModel.slide_number).where(
                SessionSlideModel.session_id.in_(session_ids)
            )
        )
        slides: Dict[UUID, Set[int]] = defaultdict(set)
        for session_id, slide_number in result.all():
            slides[session_id].add(slide_number)
        return slides

    def _to_entity(self, model: ViewingSessionModel, slides: Set[int]) -> ViewingSession:
        return ViewingSession(
            id=model.id,
            viewer_id=model.viewer_id,
            deck_id=model.deck_id,
            session_token=model.session_token,
            started_at=ensure_utc(model.started_at),
            ended_at=ensure_utc(model.ended_at),
            duration=model.duration,
            visited_slides=frozenset(slides),
            user_agent=model.user_agent,
            ip_address=model.ip_address,
        )
