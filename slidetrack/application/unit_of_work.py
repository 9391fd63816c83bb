"""
Unit of Work pattern implementation for transaction boundaries.

One UnitOfWork wraps one AsyncSession and the repositories bound to it. Every
write-path use case runs inside ``async with uow`` and commits explicitly;
leaving the block without a commit rolls the transaction back.
"""

from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from slidetrack.application.ports import (
    DeckRepositoryPort,
    NavigationRepositoryPort,
    SessionRepositoryPort,
    ViewerRepositoryPort,
)


class UnitOfWork:
    """
    Unit of Work implementation that manages transaction boundaries
    and provides access to repositories within a transaction context.
    """

    def __init__(
        self,
        session: AsyncSession,
        deck_repo: DeckRepositoryPort,
        viewer_repo: ViewerRepositoryPort,
        session_repo: SessionRepositoryPort,
        navigation_repo: NavigationRepositoryPort,
    ):
        self.session = session
        self.deck_repo = deck_repo
        self.viewer_repo = viewer_repo
        self.session_repo = session_repo
        self.navigation_repo = navigation_repo
        self._committed = False

    async def __aenter__(self):
        """Enter transaction context."""
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit transaction context with cleanup."""
        if exc_type is not None:
            await self.rollback()
        elif not self._committed:
            await self.rollback()

    async def commit(self):
        """
        Commit the transaction.

        This makes all changes within the transaction permanent.
        """
        await self.session.commit()
        self._committed = True

    async def rollback(self):
        """
        Rollback the transaction.

        This discards all changes made within the transaction.
        """
        await self.session.rollback()

    @asynccontextmanager
    async def savepoint(self):
        """Nested transaction; a failure inside only undoes the nested work."""
        async with self.session.begin_nested():
            yield self
