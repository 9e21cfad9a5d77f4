from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.cars.models import PricedCar
from app.dependencies import get_session_store
from app.main import app
from app.negotiations.store import SessionStore
from app.personas.models import PersonaProfile

# A mid-market sedan with a round asking price so factor maths is easy to read.
SAMPLE_CAR = {
    "car_id": "honda-civic-2024",
    "make": "Honda",
    "model": "Civic",
    "year": 2024,
    "price": 30000,
    "msrp": 28000,
    "trade_in_value": 23100,
    "private_party_value": 26180,
    "market_trend": "stable",
    "market_activity": "high",
    "fuel_economy": 32,
    "safety_rating": 5,
    "available_listings": 24,
    "description": "a mighty 2024 Honda Civic.",
}


@pytest.fixture
def car():
    return PricedCar(**SAMPLE_CAR)


@pytest.fixture
def persona():
    """Price-only persona: 85% floor, no financing or patience settings."""
    return PersonaProfile(
        id="test_dealer",
        name="Test Dealer",
        title="The Reasonable Seller",
        min_acceptable_price_factor=0.85,
    )


def make_mock_db(cars_data, find_one_result):
    mock_cursor = AsyncMock()
    mock_cursor.to_list = AsyncMock(return_value=cars_data)

    mock_collection = MagicMock()
    mock_collection.find = MagicMock(return_value=mock_cursor)
    mock_collection.find_one = AsyncMock(return_value=find_one_result)

    mock_db = MagicMock()
    mock_db.cars = mock_collection
    return mock_db


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(retention_seconds=300, clock=clock)


@pytest.fixture
async def client(store):
    """HTTP client with a mocked catalogue holding SAMPLE_CAR and a fresh session store."""
    mock_db = make_mock_db([SAMPLE_CAR], SAMPLE_CAR)
    app.dependency_overrides[get_session_store] = lambda: store
    with patch("app.cars.service.get_database", return_value=mock_db):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def client_no_car(store):
    """HTTP client whose catalogue is empty."""
    mock_db = make_mock_db([], None)
    app.dependency_overrides[get_session_store] = lambda: store
    with patch("app.cars.service.get_database", return_value=mock_db):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()
