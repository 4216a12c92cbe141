"""Tests for the profile API endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from parlor.records import RecordStore
from parlor_api.main import app
from parlor_api.routes.profiles import get_store


@pytest.fixture
def seeded_store(stats_path):
    """A store with two profiles on disk."""
    store = RecordStore(stats_path)
    you = store.get("You")
    you.wins = 3
    you.losses = 1
    you.total_games = 4
    you.achievements.update({"HOT_STREAK", "BLACKJACK"})
    store.get("Cautious Carl").losses = 2
    store.save()
    return store


@pytest_asyncio.fixture
async def client(seeded_store):
    """Create test client against the seeded store."""
    app.dependency_overrides[get_store] = lambda: RecordStore(seeded_store.path)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health_check(client):
    """Test health check endpoint."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_list_profiles(client):
    response = await client.get("/api/profiles")
    assert response.status_code == 200
    names = [p["name"] for p in response.json()["profiles"]]
    assert names == ["Cautious Carl", "You"]


@pytest.mark.asyncio
async def test_get_profile(client):
    response = await client.get("/api/profiles/You")
    assert response.status_code == 200
    data = response.json()
    assert data["wins"] == 3
    assert data["total_games"] == 4
    assert data["win_rate"] == 75.0
    assert data["achievements"] == ["BLACKJACK", "HOT_STREAK"]


@pytest.mark.asyncio
async def test_get_profile_with_space(client):
    response = await client.get("/api/profiles/Cautious Carl")
    assert response.status_code == 200
    assert response.json()["losses"] == 2


@pytest.mark.asyncio
async def test_get_unknown_profile(client):
    response = await client.get("/api/profiles/Ghost")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reset_profile(client, stats_path):
    response = await client.post("/api/profiles/You/reset")
    assert response.status_code == 200
    assert response.json() == {"reset": ["You"]}

    stored = RecordStore(stats_path)
    assert stored.find("You").wins == 0
    assert stored.find("You").achievements == set()
    assert stored.find("Cautious Carl").losses == 2


@pytest.mark.asyncio
async def test_reset_unknown_profile(client):
    response = await client.post("/api/profiles/Ghost/reset")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reset_all(client, stats_path):
    response = await client.post("/api/profiles/reset")
    assert response.status_code == 200
    assert response.json() == {"reset": ["Cautious Carl", "You"]}
    assert all(record.total_games == 0 for record in RecordStore(stats_path).all().values())


@pytest.mark.asyncio
async def test_achievement_catalog(client):
    response = await client.get("/api/achievements")
    assert response.status_code == 200
    keys = [entry["key"] for entry in response.json()]
    assert keys[0] == "BLACKJACK"
    assert len(keys) == 11
