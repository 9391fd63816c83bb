"""
Deck repository for data access operations.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.ports import DeckRepositoryPort
from slidetrack.data.models.deck_model import DeckModel
from slidetrack.data.repositories.base import conflict_guard
from slidetrack.domain.clock import ensure_utc
from slidetrack.domain.entities.deck import Deck
from slidetrack.infra.config.logging_config import get_logger


class DeckRepository(DeckRepositoryPort):
    def __init__(self, session: AsyncSession):
        self.session = session
        self._log = get_logger("repo.deck")

    async def create(self, deck: Deck) -> Deck:
        """Create a new deck."""
        deck_model = DeckModel(
            id=deck.id,
            owner_id=deck.owner_id,
            title=deck.title,
            file_name=deck.file_name,
            file_size=deck.file_size,
            total_pages=deck.total_pages,
            is_active=deck.is_active,
            public_token=deck.public_token,
            created_at=deck.created_at,
            updated_at=deck.updated_at,
        )

        async with conflict_guard(self.session, "Deck share token"):
            self.session.add(deck_model)
            await self.session.flush()

        self._log.info("deck.create", deck_id=str(deck.id), owner_id=str(deck.owner_id))
        return deck

    async def get_by_id(self, deck_id: UUID) -> Optional[Deck]:
        """Get deck by ID."""
        result = await self.session.execute(
            select(DeckModel).where(DeckModel.id == deck_id)
            .execution_options(populate_existing=True)
        )
        deck_model = result.scalar_one_or_none()

        if not deck_model:
            self._log.info("deck.get.not_found", deck_id=str(deck_id))
            return None

        return self._to_entity(deck_model)

    async def get_by_token(self, public_token: str) -> Optional[Deck]:
        result = await self.session.execute(
            select(DeckModel).where(DeckModel.public_token == public_token)
            .execution_options(populate_existing=True)
        )
        deck_model = result.scalar_one_or_none()

        if not deck_model:
            self._log.info("deck.get_by_token.not_found")
            return None

        return self._to_entity(deck_model)

    async def list_by_owner(self, owner_id: UUID) -> List[Deck]:
        """Get all decks for an owner."""
        result = await self.session.execute(
            select(DeckModel)
            .where(DeckModel.owner_id == owner_id)
            .order_by(DeckModel.created_at.desc())
        )
        items = [self._to_entity(model) for model in result.scalars().all()]
        self._log.info("deck.list", count=len(items), owner_id=str(owner_id))
        return items

    async def update(self, deck: Deck) -> Deck:
        """Update an existing deck."""
        await self.session.execute(
            update(DeckModel)
            .where(DeckModel.id == deck.id)
            .values(
                title=deck.title,
                is_active=deck.is_active,
                updated_at=deck.updated_at,
            )
        )
        self._log.info("deck.update", deck_id=str(deck.id), is_active=deck.is_active)
        return deck

    async def delete(self, deck_id: UUID) -> bool:
        """Delete a deck."""
        result = await self.session.execute(
            delete(DeckModel).where(DeckModel.id == deck_id)
        )
        deleted = result.rowcount > 0
        self._log.info("deck.delete", deck_id=str(deck_id), deleted=deleted)
        return deleted

    def _to_entity(self, model: DeckModel) -> Deck:
        """Convert SQLAlchemy model to domain entity."""
        return Deck(
            id=model.id,
            owner_id=model.owner_id,
            title=model.title,
            total_pages=model.total_pages,
            public_token=model.public_token,
            created_at=ensure_utc(model.created_at),
            is_active=model.is_active,
            file_name=model.file_name,
            file_size=model.file_size,
            updated_at=ensure_utc(model.updated_at),
        )
