"""
Concurrent tracking writes against a file-backed SQLite database.

Each task gets its own session and UnitOfWork, the way concurrent requests
do, so counter increments and visited-slide inserts really interleave.
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from slidetrack.application.use_cases import (
    CreateDeckUseCase,
    OpenSessionUseCase,
    RecordNavigationUseCase,
    ResolveViewerUseCase,
)
from slidetrack.data.models import SlideNavigationModel, ViewerModel
from slidetrack.infra.config.database import configure_sqlite, init_models
from slidetrack.infra.config.dependencies import build_unit_of_work

TASKS = 20


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tracking.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    configure_sqlite(engine)
    await init_models(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def _run(session_factory, use_case_cls, *args, **kwargs):
    async with session_factory() as session:
        use_case = use_case_cls(build_unit_of_work(session), **kwargs)
        return await use_case.execute(*args)


async def _scalar(session_factory, stmt):
    async with session_factory() as session:
        return (await session.execute(stmt)).scalar_one()


@pytest.fixture
async def deck(session_factory, owner_id, clock):
    return await _run(
        session_factory, CreateDeckUseCase, owner_id, "Shared deck", 3, clock=clock
    )


class TestConcurrentTracking:
    async def test_navigation_from_many_tabs_loses_no_time(self, session_factory, deck, clock):
        viewer, _ = await _run(
            session_factory, ResolveViewerUseCase, deck.id, "tabs@example.com", clock=clock
        )
        session = await _run(
            session_factory, OpenSessionUseCase, viewer.id, deck.id, clock=clock
        )

        dwell = [i + 1 for i in range(TASKS)]
        await asyncio.gather(
            *(
                _run(
                    session_factory,
                    RecordNavigationUseCase,
                    session.id,
                    viewer.id,
                    deck.id,
                    (i % 3) + 1,
                    seconds,
                    clock=clock,
                )
                for i, seconds in enumerate(dwell)
            )
        )

        total_time = await _scalar(
            session_factory,
            select(ViewerModel.total_time_spent).where(ViewerModel.id == viewer.id),
        )
        assert total_time == sum(dwell)

        events = await _scalar(
            session_factory,
            select(func.count()).select_from(SlideNavigationModel),
        )
        # One event per navigation plus the first slide logged on open
        assert events == TASKS + 1

        async with session_factory() as db:
            reloaded = await build_unit_of_work(db).session_repo.get_by_id(session.id)
        assert reloaded.visited_slides == frozenset({1, 2, 3})

    async def test_simultaneous_first_opens_make_one_viewer(self, session_factory, deck, clock):
        results = await asyncio.gather(
            *(
                _run(
                    session_factory,
                    ResolveViewerUseCase,
                    deck.id,
                    "race@example.com",
                    clock=clock,
                )
                for _ in range(TASKS)
            )
        )

        assert len({viewer.id for viewer, _ in results}) == 1
        assert sum(1 for _, is_new in results if is_new) == 1

        rows = await _scalar(
            session_factory,
            select(func.count())
            .select_from(ViewerModel)
            .where(ViewerModel.deck_id == deck.id),
        )
        assert rows == 1

        opens = await _scalar(
            session_factory,
            select(ViewerModel.total_opens).where(ViewerModel.deck_id == deck.id),
        )
        assert opens == TASKS
