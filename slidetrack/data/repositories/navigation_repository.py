"""
Slide navigation event repository (append-only log).
"""

from typing import List, Sequence
from uuid import UUID

from sqlalchemy import delete, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.ports import NavigationRepositoryPort
from slidetrack.data.models.slide_navigation_model import SlideNavigationModel
from slidetrack.data.repositories.base import conflict_guard
from slidetrack.domain.clock import ensure_utc
from slidetrack.domain.entities.slide_navigation import SlideNavigationEvent
from slidetrack.domain.services.engagement_metrics import SlideStats
from slidetrack.infra.config.logging_config import get_logger


class NavigationRepository(NavigationRepositoryPort):
    def __init__(self, session: AsyncSession):
        self.session = session
        self._log = get_logger("repo.navigation")

    async def append(self, event: SlideNavigationEvent) -> SlideNavigationEvent:
        model = SlideNavigationModel(
            session_id=event.session_id,
            viewer_id=event.viewer_id,
            deck_id=event.deck_id,
            slide_number=event.slide_number,
            viewed_at=event.viewed_at,
            time_spent=event.time_spent,
        )

        async with conflict_guard(self.session, "Navigation event"):
            self.session.add(model)
            await self.session.flush()

        self._log.info(
            "navigation.append",
            event_id=model.id,
            slide_number=event.slide_number,
            linked=event.is_linked,
        )
        return self._to_entity(model)

    async def slide_stats(self, deck_id: UUID) -> List[SlideStats]:
        # COUNT(DISTINCT session_id) ignores NULLs, so unlinked events only
        # count as views
        result = await self.session.execute(
            select(
                SlideNavigationModel.slide_number,
                func.count(SlideNavigationModel.id),
                func.coalesce(func.sum(SlideNavigationModel.time_spent), 0),
                func.count(distinct(SlideNavigationModel.session_id)),
            )
            .where(SlideNavigationModel.deck_id == deck_id)
            .group_by(SlideNavigationModel.slide_number)
            .order_by(SlideNavigationModel.slide_number)
        )
        stats = [
            SlideStats(
                slide_number=slide_number,
                views=int(views),
                total_time=int(total_time),
                unique_sessions=int(sessions),
            )
            for slide_number, views, total_time, sessions in result.all()
        ]
        self._log.info("navigation.slide_stats", deck_id=str(deck_id), slides=len(stats))
        return stats

    async def list_by_sessions(
        self, session_ids: Sequence[UUID]
    ) -> List[SlideNavigationEvent]:
        if not session_ids:
            return []
        result = await self.session.execute(
            select(SlideNavigationModel)
            .where(SlideNavigationModel.session_id.in_(list(session_ids)))
            .order_by(SlideNavigationModel.viewed_at, SlideNavigationModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_unlinked_by_viewer(
        self, deck_id: UUID, viewer_id: UUID
    ) -> List[SlideNavigationEvent]:
        result = await self.session.execute(
            select(SlideNavigationModel)
            .where(
                SlideNavigationModel.deck_id == deck_id,
                SlideNavigationModel.viewer_id == viewer_id,
                SlideNavigationModel.session_id.is_(None),
            )
            .order_by(SlideNavigationModel.viewed_at, SlideNavigationModel.id)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def delete_by_deck(self, deck_id: UUID) -> int:
        result = await self.session.execute(
            delete(SlideNavigationModel).where(SlideNavigationModel.deck_id == deck_id)
        )
        self._log.info("navigation.delete_by_deck", deck_id=str(deck_id), count=result.rowcount)
        return result.rowcount

    def _to_entity(self, model: SlideNavigationModel) -> SlideNavigationEvent:
        return SlideNavigationEvent(
            id=model.id,
            session_id=model.session_id,
            viewer_id=model.viewer_id,
            deck_id=model.deck_id,
            slide_number=model.slide_number,
            viewed_at=ensure_utc(model.viewed_at),
            time_spent=model.time_spent,
        )
