"""
End-to-end tracking flows through the use cases against in-memory SQLite.
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from slidetrack.application.use_cases import (
    CloseSessionUseCase,
    CreateDeckUseCase,
    DeckAnalyticsUseCase,
    DeleteDeckUseCase,
    OpenSessionUseCase,
    RecordNavigationUseCase,
    ResolveViewerUseCase,
    UpdateDeckUseCase,
    ViewerDetailUseCase,
)
from slidetrack.data.models import (
    SessionSlideModel,
    SlideNavigationModel,
    ViewerModel,
    ViewingSessionModel,
)
from slidetrack.domain.exceptions import NotFoundError, SessionClosedError


@pytest.fixture
def tracker(uow, clock):
    class Tracker:
        create_deck = CreateDeckUseCase(uow, clock=clock)
        update_deck = UpdateDeckUseCase(uow)
        delete_deck = DeleteDeckUseCase(uow)
        resolve = ResolveViewerUseCase(uow, clock=clock)
        open_session = OpenSessionUseCase(uow, clock=clock)
        close_session = CloseSessionUseCase(uow, clock=clock)
        navigate = RecordNavigationUseCase(uow, clock=clock)
        analytics = DeckAnalyticsUseCase(uow, clock=clock)
        viewer_detail = ViewerDetailUseCase(uow)

    return Tracker


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestViewingScenario:
    async def test_two_slide_deck(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Two pager", 2)
        viewer, is_new = await tracker.resolve.execute(deck.id, "ana@example.com")
        session = await tracker.open_session.execute(viewer.id, deck.id)
        await tracker.navigate.execute(session.id, viewer.id, deck.id, 2, 30)
        closed = await tracker.close_session.execute(session.id, 45)

        analytics = await tracker.analytics.execute(deck.id, owner_id=owner_id)

        assert is_new
        assert closed.duration == 45
        assert analytics.total_viewers == 1
        assert analytics.total_opens == 1
        assert analytics.total_sessions == 1
        assert analytics.average_time_spent == 30
        slides = {s.slide_number: s for s in analytics.slide_stats}
        assert slides[1].views == 1
        assert slides[2].views == 1
        assert slides[2].average_time == 30
        assert analytics.most_viewed_slide == 1
        assert analytics.drop_off_slide == 1
        assert analytics.engagement_rate == 50
        assert [d.views for d in analytics.views_over_time] == [1]

    async def test_repeat_resolution(self, tracker, owner_id, clock):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 3)
        first, _ = await tracker.resolve.execute(deck.id, "ana@example.com", company="Acme")
        clock.advance(hours=2)
        second, is_new = await tracker.resolve.execute(deck.id, " ANA@example.com ", company="")
        third, _ = await tracker.resolve.execute(deck.id, "ana@example.com")

        assert not is_new
        assert third.id == first.id
        assert third.total_opens == 3
        assert third.first_viewed_at == first.first_viewed_at
        assert third.last_viewed_at > first.last_viewed_at
        assert third.company == "Acme"

        analytics = await tracker.analytics.execute(deck.id)
        assert analytics.total_opens == 3

    async def test_total_opens_matches_viewer_sum(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 3)
        for email, opens in (("a@x.io", 2), ("b@x.io", 1), ("c@x.io", 4)):
            for _ in range(opens):
                await tracker.resolve.execute(deck.id, email)

        analytics = await tracker.analytics.execute(deck.id)
        assert analytics.total_opens == sum(v.total_opens for v in analytics.viewers) == 7
        assert analytics.total_viewers == 3

    async def test_same_slide_repeatedly(self, tracker, owner_id, uow):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 4)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        session = await tracker.open_session.execute(viewer.id, deck.id, initial_slide=None)

        for _ in range(6):
            await tracker.navigate.execute(session.id, viewer.id, deck.id, 3, 2)

        stored = await uow.session_repo.get_by_id(session.id)
        assert stored.visited_slides == frozenset({3})
        analytics = await tracker.analytics.execute(deck.id)
        assert analytics.slide_stats[0].slide_number == 3
        assert analytics.slide_stats[0].views == 6
        assert analytics.slide_stats[0].unique_sessions == 1
        assert analytics.viewers[0].total_time_spent == 12

    async def test_closed_session_rejects_navigation(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 2)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        session = await tracker.open_session.execute(viewer.id, deck.id)
        await tracker.close_session.execute(session.id, 10)

        with pytest.raises(SessionClosedError):
            await tracker.navigate.execute(session.id, viewer.id, deck.id, 2, 3)

        # Nothing from the rejected call was kept
        analytics = await tracker.analytics.execute(deck.id)
        assert analytics.viewers[0].total_time_spent == 0

    async def test_close_twice_keeps_latest(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 2)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        session = await tracker.open_session.execute(viewer.id, deck.id)
        assert session.duration is None

        await tracker.close_session.execute(session.id, 10)
        closed = await tracker.close_session.execute(session.id, 99)
        assert closed.duration == 99

    async def test_unlinked_events_count_as_views_only(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 3)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        await tracker.navigate.execute(None, viewer.id, deck.id, 2, 8)

        analytics = await tracker.analytics.execute(deck.id)
        assert analytics.slide_stats[0].views == 1
        assert analytics.slide_stats[0].unique_sessions == 0
        assert analytics.viewers[0].total_time_spent == 8

        detail = await tracker.viewer_detail.execute(deck.id, viewer.id)
        assert detail.sessions == []
        assert [e.slide_number for e in detail.unlinked_events] == [2]

    async def test_deactivated_deck_blocks_new_viewers_but_keeps_analytics(
        self, tracker, owner_id
    ):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 2)
        await tracker.resolve.execute(deck.id, "ana@example.com")
        await tracker.update_deck.execute(deck.id, owner_id, is_active=False)

        with pytest.raises(NotFoundError):
            await tracker.resolve.execute(deck.id, "bo@example.com")

        analytics = await tracker.analytics.execute(deck.id, owner_id=owner_id)
        assert analytics.total_viewers == 1
        assert analytics.deck.is_active is False


class TestViewerDetailScenario:
    async def test_sessions_most_recent_first(self, tracker, owner_id, clock):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 3)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")

        morning = await tracker.open_session.execute(viewer.id, deck.id)
        await tracker.navigate.execute(morning.id, viewer.id, deck.id, 2, 4)
        await tracker.navigate.execute(morning.id, viewer.id, deck.id, 3, 6)
        await tracker.close_session.execute(morning.id, 20)

        clock.advance(hours=5)
        evening = await tracker.open_session.execute(viewer.id, deck.id)
        await tracker.navigate.execute(evening.id, viewer.id, deck.id, 3, 9)

        detail = await tracker.viewer_detail.execute(deck.id, viewer.id, owner_id=owner_id)

        assert [s.session.id for s in detail.sessions] == [evening.id, morning.id]
        assert [e.slide_number for e in detail.sessions[0].events] == [1, 3]
        assert [e.slide_number for e in detail.sessions[1].events] == [1, 2, 3]
        for item in detail.sessions:
            stamps = [e.viewed_at for e in item.events]
            assert stamps == sorted(stamps)
        assert detail.viewer.total_time_spent == 19

    async def test_session_without_events_is_listed(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 3)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        session = await tracker.open_session.execute(viewer.id, deck.id, initial_slide=None)

        detail = await tracker.viewer_detail.execute(deck.id, viewer.id)
        assert [s.session.id for s in detail.sessions] == [session.id]
        assert detail.sessions[0].events == []


class TestDeckDeletion:
    async def test_cascade_removes_everything(self, tracker, owner_id, test_db_session):
        deck = await tracker.create_deck.execute(owner_id, "Doomed", 5)
        other = await tracker.create_deck.execute(owner_id, "Survivor", 2)
        survivor, _ = await tracker.resolve.execute(other.id, "keep@example.com")
        await tracker.open_session.execute(survivor.id, other.id)

        viewers = [
            (await tracker.resolve.execute(deck.id, f"v{i}@example.com")).viewer
            for i in range(3)
        ]
        owners = [viewers[0], viewers[0], viewers[1], viewers[1], viewers[2]]
        sessions = [await tracker.open_session.execute(v.id, deck.id) for v in owners]
        # 5 initial slide-1 events plus 35 navigations
        for i in range(35):
            session = sessions[i % 5]
            await tracker.navigate.execute(
                session.id, session.viewer_id, deck.id, (i % 5) + 1, 3
            )

        assert await _count(test_db_session, SlideNavigationModel) == 41

        await tracker.delete_deck.execute(deck.id, owner_id)

        with pytest.raises(NotFoundError):
            await tracker.analytics.execute(deck.id, owner_id=owner_id)
        assert await _count(test_db_session, SlideNavigationModel) == 1
        assert await _count(test_db_session, ViewingSessionModel) == 1
        assert await _count(test_db_session, ViewerModel) == 1
        assert await _count(test_db_session, SessionSlideModel) == 1

        kept = await tracker.analytics.execute(other.id)
        assert kept.total_viewers == 1

    async def test_foreign_owner_cannot_delete(self, tracker, owner_id):
        deck = await tracker.create_deck.execute(owner_id, "Mine", 2)
        with pytest.raises(NotFoundError):
            await tracker.delete_deck.execute(deck.id, uuid4())
        assert (await tracker.analytics.execute(deck.id)).deck.id == deck.id


class TestAnalyticsWindow:
    async def test_views_over_time_ignores_old_sessions(self, tracker, owner_id, clock):
        deck = await tracker.create_deck.execute(owner_id, "Deck", 2)
        viewer, _ = await tracker.resolve.execute(deck.id, "ana@example.com")
        await tracker.open_session.execute(viewer.id, deck.id)
        clock.advance(days=40)
        await tracker.open_session.execute(viewer.id, deck.id)
        await tracker.open_session.execute(viewer.id, deck.id)

        analytics = await tracker.analytics.execute(deck.id)

        assert analytics.total_sessions == 3
        assert sum(d.views for d in analytics.views_over_time) == 2
        assert analytics.views_over_time[-1].day == (clock.current - timedelta(seconds=1)).date()
