"""
API tests for owner deck management and analytics.
"""

from uuid import uuid4

import pytest

from slidetrack.infra.config.dependencies import get_current_user_id


async def _create(async_client, title="Board Deck", pages=3, **extra):
    response = await async_client.post(
        "/api/v1/decks", json={"title": title, "total_pages": pages, **extra}
    )
    assert response.status_code == 201
    return response.json()


class TestDeckManagement:
    async def test_create_deck(self, async_client):
        deck = await _create(async_client, file_name="board.pdf", file_size=1024)
        assert deck["title"] == "Board Deck"
        assert deck["total_pages"] == 3
        assert deck["is_active"] is True
        assert deck["share_url"].endswith(deck["public_token"])
        assert deck["file_name"] == "board.pdf"

    async def test_create_rejects_zero_pages(self, async_client):
        response = await async_client.post(
            "/api/v1/decks", json={"title": "x", "total_pages": 0}
        )
        assert response.status_code == 422

    async def test_list_newest_first(self, async_client):
        first = await _create(async_client, title="First")
        second = await _create(async_client, title="Second")

        response = await async_client.get("/api/v1/decks")
        body = response.json()
        assert body["total"] == 2
        assert [d["id"] for d in body["items"]] == [second["id"], first["id"]]

    async def test_update_keeps_token(self, async_client):
        deck = await _create(async_client)
        response = await async_client.patch(
            f"/api/v1/decks/{deck['id']}", json={"title": "Renamed", "is_active": False}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["is_active"] is False
        assert body["public_token"] == deck["public_token"]

    async def test_get_unknown_deck(self, async_client):
        response = await async_client.get(f"/api/v1/decks/{uuid4()}")
        assert response.status_code == 404

    async def test_other_owner_sees_404(self, app, async_client):
        deck = await _create(async_client)
        app.dependency_overrides[get_current_user_id] = lambda: uuid4()

        response = await async_client.get(f"/api/v1/decks/{deck['id']}")
        assert response.status_code == 404
        response = await async_client.get(f"/api/v1/decks/{deck['id']}/analytics")
        assert response.status_code == 404

    async def test_delete(self, async_client):
        deck = await _create(async_client)
        access = await async_client.post(
            "/api/v1/viewer/access",
            json={"token": deck["public_token"], "email": "ana@example.com"},
        )
        viewer_id = access.json()["viewer"]["id"]
        await async_client.post(
            "/api/v1/viewer/session/start", json={"deck_id": deck["id"], "viewer_id": viewer_id}
        )

        response = await async_client.delete(f"/api/v1/decks/{deck['id']}")
        assert response.status_code == 204

        response = await async_client.get(f"/api/v1/decks/{deck['id']}/analytics")
        assert response.status_code == 404


class TestAnalyticsEndpoints:
    @pytest.fixture
    async def tracked(self, async_client):
        deck = await _create(async_client, pages=2)
        access = await async_client.post(
            "/api/v1/viewer/access",
            json={"token": deck["public_token"], "email": "ana@example.com"},
        )
        viewer_id = access.json()["viewer"]["id"]
        session = (
            await async_client.post(
                "/api/v1/viewer/session/start",
                json={"deck_id": deck["id"], "viewer_id": viewer_id},
            )
        ).json()
        await async_client.post(
            "/api/v1/viewer/track",
            json={
                "session_id": session["id"],
                "viewer_id": viewer_id,
                "deck_id": deck["id"],
                "slide_number": 2,
                "time_spent": 30,
            },
        )
        await async_client.post(
            "/api/v1/viewer/session/end", json={"session_id": session["id"], "duration": 45}
        )
        return deck, viewer_id, session

    async def test_analytics(self, async_client, tracked):
        deck, _, _ = tracked
        response = await async_client.get(f"/api/v1/decks/{deck['id']}/analytics")
        assert response.status_code == 200
        body = response.json()
        assert body["total_viewers"] == 1
        assert body["total_opens"] == 1
        assert body["total_sessions"] == 1
        assert body["average_time_spent"] == 30
        assert body["most_viewed_slide"] == 1
        assert body["engagement_rate"] == 50
        assert [s["slide_number"] for s in body["slide_stats"]] == [1, 2]
        assert body["slide_stats"][1]["average_time"] == 30
        assert len(body["views_over_time"]) == 1
        assert body["recent_viewers"][0]["email"] == "ana@example.com"

    async def test_analytics_with_slides_outside_the_deck(self, async_client, tracked):
        deck, viewer_id, _ = tracked
        for _ in range(3):
            response = await async_client.post(
                "/api/v1/viewer/track",
                json={"viewer_id": viewer_id, "deck_id": deck["id"], "slide_number": -1},
            )
            assert response.status_code == 201

        response = await async_client.get(f"/api/v1/decks/{deck['id']}/analytics")
        assert response.status_code == 200
        body = response.json()
        assert body["most_viewed_slide"] == -1
        assert body["engagement_rate"] == 0
        assert body["slide_stats"][0]["slide_number"] == -1

    async def test_analytics_empty_deck(self, async_client):
        deck = await _create(async_client, pages=6)
        body = (await async_client.get(f"/api/v1/decks/{deck['id']}/analytics")).json()
        assert body["total_viewers"] == 0
        assert body["average_time_spent"] == 0
        assert body["most_viewed_slide"] == 1
        assert body["drop_off_slide"] == 6
        assert body["slide_stats"] == []

    async def test_viewer_detail(self, async_client, tracked):
        deck, viewer_id, session = tracked
        response = await async_client.get(f"/api/v1/decks/{deck['id']}/viewers/{viewer_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["viewer"]["id"] == viewer_id
        assert body["sessions"][0]["session"]["id"] == session["id"]
        assert [e["slide_number"] for e in body["sessions"][0]["events"]] == [1, 2]
        assert body["unlinked_events"] == []

    async def test_viewer_detail_unknown_viewer(self, async_client, tracked):
        deck, _, _ = tracked
        response = await async_client.get(f"/api/v1/decks/{deck['id']}/viewers/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "VIEWER_NOT_FOUND"


class TestSystemEndpoints:
    async def test_health(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_request_id_is_echoed(self, async_client):
        response = await async_client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
