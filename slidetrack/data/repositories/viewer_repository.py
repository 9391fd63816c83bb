"""
Viewer repository. Counters are only ever changed with SQL-side increments.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.ports import ViewerRepositoryPort
from slidetrack.data.models.viewer_model import ViewerModel
from slidetrack.data.repositories.base import conflict_guard
from slidetrack.domain.clock import ensure_utc
from slidetrack.domain.entities.viewer import PROFILE_FIELDS, Viewer
from slidetrack.infra.config.logging_config import get_logger


class ViewerRepository(ViewerRepositoryPort):
    def __init__(self, session: AsyncSession):
        self.session = session
        self._log = get_logger("repo.viewer")

    async def create(self, viewer: Viewer) -> Viewer:
        viewer_model = ViewerModel(
            id=viewer.id,
            deck_id=viewer.deck_id,
            email=viewer.email,
            first_name=viewer.first_name,
            last_name=viewer.last_name,
            company=viewer.company,
            first_viewed_at=viewer.first_viewed_at,
            last_viewed_at=viewer.last_viewed_at,
            total_opens=viewer.total_opens,
            total_time_spent=viewer.total_time_spent,
        )

        async with conflict_guard(self.session, "Viewer (deck_id, email)"):
            self.session.add(viewer_model)
            await self.session.flush()

        self._log.info("viewer.create", viewer_id=str(viewer.id), deck_id=str(viewer.deck_id))
        return viewer

    async def get_by_id(self, viewer_id: UUID) -> Optional[Viewer]:
        return await self._reload(viewer_id)

    async def get_by_deck_and_email(self, deck_id: UUID, email: str) -> Optional[Viewer]:
        result = await self.session.execute(
            select(ViewerModel).where(
                ViewerModel.deck_id == deck_id, ViewerModel.email == email
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def record_open(
        self, viewer_id: UUID, opened_at: datetime, profile: Dict[str, str]
    ) -> Optional[Viewer]:
        values = {
            "total_opens": ViewerModel.total_opens + 1,
            "last_viewed_at": opened_at,
        }
        values.update({k: v for k, v in profile.items() if k in PROFILE_FIELDS and v})

        result = await self.session.execute(
            update(ViewerModel)
            .where(ViewerModel.id == viewer_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        self._log.info(
            "viewer.record_open", viewer_id=str(viewer_id), merged=sorted(profile)
        )
        return await self._reload(viewer_id)

    async def add_time_spent(self, viewer_id: UUID, deck_id: UUID, seconds: int) -> bool:
        result = await self.session.execute(
            update(ViewerModel)
            .where(ViewerModel.id == viewer_id, ViewerModel.deck_id == deck_id)
            .values(total_time_spent=ViewerModel.total_time_spent + seconds)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def list_by_deck(self, deck_id: UUID) -> List[Viewer]:
        result = await self.session.execute(
            select(ViewerModel)
            .where(ViewerModel.deck_id == deck_id)
            .order_by(ViewerModel.last_viewed_at.desc(), ViewerModel.email)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def list_recent(self, deck_id: UUID, limit: int) -> List[Viewer]:
        result = await self.session.execute(
            select(ViewerModel)
            .where(ViewerModel.deck_id == deck_id)
            .order_by(ViewerModel.last_viewed_at.desc(), ViewerModel.email)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def totals(self, deck_id: UUID) -> Tuple[int, int, int]:
        result = await self.session.execute(
            select(
                func.count(ViewerModel.id),
                func.coalesce(func.sum(ViewerModel.total_opens), 0),
                func.coalesce(func.sum(ViewerModel.total_time_spent), 0),
            ).where(ViewerModel.deck_id == deck_id)
        )
        count, opens, time_spent = result.one()
        return int(count), int(opens), int(time_spent)

    async def delete_by_deck(self, deck_id: UUID) -> int:
        result = await self.session.execute(
            delete(ViewerModel).where(ViewerModel.deck_id == deck_id)
        )
        self._log.info("viewer.delete_by_deck", deck_id=str(deck_id), count=result.rowcount)
        return result.rowcount

    async def _reload(self, viewer_id: UUID) -> Optional[Viewer]:
        result = await self.session.execute(
            select(ViewerModel)
            .where(ViewerModel.id == viewer_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    def _to_entity(self, model: ViewerModel) -> Viewer:
        return Viewer(
            id=model.id,
            deck_id=model.deck_id,
            email=model.email,
            first_viewed_at=ensure_utc(model.first_viewed_at),
            last_viewed_at=ensure_utc(model.last_viewed_at),
            total_opens=model.total_opens,
            total_time_spent=model.total_time_spent,
            first_name=model.first_name,
            last_name=model.last_name,
            company=model.company,
        )
