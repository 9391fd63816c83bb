"""
Use Cases: Deck management for owners.

Create, list, read, update and delete decks, plus the public share-link
lookup used by viewers. Page counts and file metadata come from the upload
pipeline; this layer only records them.
"""

from typing import List, Optional
from uuid import UUID, uuid4

from slidetrack.application.unit_of_work import UnitOfWork
from slidetrack.domain.clock import Clock, utcnow
from slidetrack.domain.entities.deck import Deck
from slidetrack.domain.exceptions import (
    DeckInactiveError,
    DeckNotFoundError,
    InvalidInputError,
    NotFoundError,
)
from slidetrack.domain.validators.deck_validators import DeckValidators
from slidetrack.domain.value_objects.share_token import (
    DEFAULT_SHARE_TOKEN_BYTES,
    generate_share_token,
)
from slidetrack.infra.config.logging_config import bind_context, get_logger


async def _owned_deck(uow: UnitOfWork, deck_id: UUID, owner_id: UUID) -> Deck:
    deck = await uow.deck_repo.get_by_id(deck_id)
    if not deck or not deck.is_owned_by(owner_id):
        raise DeckNotFoundError(deck_id)
    return deck


class CreateDeckUseCase:
    """Register an uploaded deck and issue its share token."""

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock = utcnow,
        token_bytes: int = DEFAULT_SHARE_TOKEN_BYTES,
    ):
        self.uow = uow
        self.clock = clock
        self.token_bytes = token_bytes
        self._log = get_logger("usecase.create_deck")

    async def execute(
        self,
        owner_id: UUID,
        title: str,
        total_pages: int,
        file_name: Optional[str] = None,
        file_size: Optional[int] = None,
    ) -> Deck:
        bind_context(user_id=str(owner_id))
        self._log.info("usecase.start", action="create_deck")

        title = DeckValidators.validate_title(title)
        DeckValidators.validate_total_pages(total_pages)
        DeckValidators.validate_file_size(file_size)

        deck = Deck(
            id=uuid4(),
            owner_id=owner_id,
            title=title,
            total_pages=total_pages,
            public_token=generate_share_token(self.token_bytes),
            created_at=self.clock(),
            is_active=True,
            file_name=file_name,
            file_size=file_size,
        )

        async with self.uow:
            await self.uow.deck_repo.create(deck)
            await self.uow.commit()

        self._log.info("usecase.success", deck_id=str(deck.id), total_pages=total_pages)
        return deck


class ListDecksUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, owner_id: UUID) -> List[Deck]:
        async with self.uow:
            return await self.uow.deck_repo.list_by_owner(owner_id)


class GetDeckUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, deck_id: UUID, owner_id: UUID) -> Deck:
        async with self.uow:
            return await _owned_deck(self.uow, deck_id, owner_id)


class GetPublicDeckUseCase:
    """Share-link lookup. Inactive decks are indistinguishable from missing ones."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._log = get_logger("usecase.public_deck")

    async def execute(self, public_token: str) -> Deck:
        if not public_token or not public_token.strip():
            raise InvalidInputError("Share token is required")

        async with self.uow:
            deck = await self.uow.deck_repo.get_by_token(public_token.strip())

        if not deck:
            self._log.info("public_deck.not_found")
            raise NotFoundError("Shared deck not found", "DECK_NOT_FOUND")
        if not deck.is_publicly_viewable():
            self._log.info("public_deck.inactive", deck_id=str(deck.id))
            raise DeckInactiveError(deck.id)
        return deck


class UpdateDeckUseCase:
    """Rename a deck or switch its share link on and off. The token never changes."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._log = get_logger("usecase.update_deck")

    async def execute(
        self,
        deck_id: UUID,
        owner_id: UUID,
        title: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Deck:
        async with self.uow:
            deck = await _owned_deck(self.uow, deck_id, owner_id)

            if title is not None:
                deck.rename(DeckValidators.validate_title(title))
            if is_active is not None:
                deck.set_active(is_active)

            if title is not None or is_active is not None:
                await self.uow.deck_repo.update(deck)
                await self.uow.commit()

        self._log.info(
            "usecase.success",
            action="update_deck",
            deck_id=str(deck_id),
            is_active=deck.is_active,
        )
        return deck


class DeleteDeckUseCase:
    """
    Hard delete a deck and everything tracked against it.

    Dependent rows are removed in order (navigation events, sessions with
    their visited slides, viewers), each step in its own savepoint. A failing
    step is logged and skipped so the deck row, removed last, still goes.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._log = get_logger("usecase.delete_deck")

    async def execute(self, deck_id: UUID, owner_id: UUID) -> None:
        bind_context(deck_id=str(deck_id), user_id=str(owner_id))

        async with self.uow:
            await _owned_deck(self.uow, deck_id, owner_id)

            steps = (
                ("navigation_events", self.uow.navigation_repo.delete_by_deck),
                ("sessions", self.uow.session_repo.delete_by_deck),
                ("viewers", self.uow.viewer_repo.delete_by_deck),
            )
            for name, delete_rows in steps:
                try:
                    async with self.uow.savepoint():
                        removed = await delete_rows(deck_id)
                    self._log.info("deck.delete.step", step=name, removed=removed)
                except Exception as e:
                    self._log.exception("deck.delete.step_failed", step=name, error=str(e))

            if not await self.uow.deck_repo.delete(deck_id):
                raise DeckNotFoundError(deck_id)
            await self.uow.commit()

        self._log.info("usecase.success", action="delete_deck")
