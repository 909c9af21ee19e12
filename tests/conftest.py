"""
Test configuration and fixtures.

Beanie runs on an in-memory mongomock client, and the FastAPI app is driven
through httpx's ASGI transport, so no MongoDB server or network is needed.
"""

import logging
from typing import AsyncGenerator, Dict

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from portfolio.api.endpoints.themes import get_theme_service
from portfolio.core.database import connect_to_mongo, database
from portfolio.main import app
from portfolio.services.auth_service import AuthService
from portfolio.services.theme_cache import ActiveThemeCache
from portfolio.services.theme_service import ThemeService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

OCEAN_VARIABLES = {
    "primary": "#0ea5e9",
    "secondary": "#38bdf8",
    "background": "#020617",
    "foreground": "#e5e7eb",
    "accent": "#22d3ee",
    "border": "#1e293b",
}


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
async def db():
    """Fresh in-memory database with Beanie initialised"""
    await connect_to_mongo(AsyncMongoMockClient())
    yield database.database
    database.client = None
    database.database = None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ActiveThemeCache:
    return ActiveThemeCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def service(db, cache) -> ThemeService:
    return ThemeService(cache=cache, use_transactions=False)


@pytest.fixture
def theme_variables() -> Dict[str, str]:
    return dict(OCEAN_VARIABLES)


@pytest.fixture
async def client(service) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with the test service injected"""
    app.dependency_overrides[get_theme_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token() -> str:
    return AuthService.create_access_token({"sub": str(ObjectId()), "role": "admin"})


@pytest.fixture
def auth_headers(admin_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}
