import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from app.core.repository import TripRepository, get_trip_repository
from app.core.settings import get_settings
from app.main import create_app
from conftest import SAMPLE_ITINERARY, FakeCollection, make_settings


def _auth(user_id: str) -> dict[str, str]:
    token = jwt.encode(
        {"sub": user_id, "aud": "authenticated"}, "test-jwt-secret", algorithm="HS256"
    )
    return {"Authorization": f"Bearer {token}"}


def _trip_body(destination: str = "Lisbon, Portugal") -> dict:
    return {
        "destination": destination,
        "start_date": "2024-06-01",
        "end_date": "2024-06-03",
        "interests": ["Art & Museums"],
        "itinerary": SAMPLE_ITINERARY,
    }


@pytest.fixture
def app():
    application = create_app()
    repository = TripRepository(FakeCollection())
    application.dependency_overrides[get_settings] = lambda: make_settings()
    application.dependency_overrides[get_trip_repository] = lambda: repository
    return application


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_trips_require_valid_token(app):
    async with _client(app) as ac:
        missing = await ac.get("/trips")
        forged = await ac.get("/trips", headers={"Authorization": "Bearer forged.token.value"})
    assert missing.status_code == 401
    assert missing.json() == {"error": "Authentication required"}
    assert forged.status_code == 401


@pytest.mark.asyncio
async def test_save_then_list_own_trips(app):
    async with _client(app) as ac:
        created = await ac.post("/trips", json=_trip_body(), headers=_auth("user-1"))
        await ac.post("/trips", json=_trip_body("Madrid, Spain"), headers=_auth("user-2"))
        listed = await ac.get("/trips", headers=_auth("user-1"))

    assert created.status_code == 201
    trip = created.json()
    assert trip["id"].startswith("trip_")
    assert trip["user_id"] == "user-1"
    assert trip["itinerary"]["items"][1]["travelTime"] == "20 mins"

    assert listed.status_code == 200
    assert [t["destination"] for t in listed.json()] == ["Lisbon, Portugal"]


@pytest.mark.asyncio
async def test_get_trip_by_id(app):
    async with _client(app) as ac:
        created = await ac.post("/trips", json=_trip_body(), headers=_auth("user-1"))
        trip_id = created.json()["id"]
        own = await ac.get(f"/trips/{trip_id}", headers=_auth("user-1"))
        other = await ac.get(f"/trips/{trip_id}", headers=_auth("user-2"))

    assert own.status_code == 200
    assert own.json()["destination"] == "Lisbon, Portugal"
    assert other.status_code == 404
    assert other.json() == {"error": "Trip not found"}


@pytest.mark.asyncio
async def test_invalid_trip_body_is_400(app):
    body = _trip_body()
    body["start_date"] = "06/01/2024"
    async with _client(app) as ac:
        response = await ac.post("/trips", json=body, headers=_auth("user-1"))
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid input"
    assert response.json()["details"].startswith("start_date:")


class _UnreachableRepository(TripRepository):
    def __init__(self):
        super().__init__(FakeCollection())

    def list_trips(self, user_id):
        raise RuntimeError("No servers found yet, Timeout: 5.0s")


@pytest.mark.asyncio
async def test_storage_failure_is_json_500_with_cors(app):
    app.dependency_overrides[get_trip_repository] = _UnreachableRepository
    async with _client(app) as ac:
        response = await ac.get("/trips", headers=_auth("user-1"))

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"error": "Failed to process request"}
    assert "Timeout" not in response.text
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == (
        "authorization, x-client-info, apikey, content-type"
    )
