"""
Pytest configuration and fixtures
Shared test setup for all test modules
"""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import Settings
from rentdesk.db.database import Database
from rentdesk.main import create_app

WEBHOOK_SECRET = "test-webhook-secret"
PASSWORD = "TestPassword123!"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a fresh SQLite file per test"""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'rentdesk-test.db'}",
        BILLING_WEBHOOK_SECRET=WEBHOOK_SECRET,
        ENVIRONMENT="test",
    )


@pytest.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Create clean database for each test"""
    db = Database(test_settings.DATABASE_URL, test_settings)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture
def app(test_settings: Settings, database: Database):
    return create_app(settings=test_settings, database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, no network"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def register(client: AsyncClient):
    """Factory registering an account; returns (account json, auth headers)"""

    async def _register(email: str = "owner@example.com", name: str = "Test Owner"):
        response = await client.post("/api/v1/auth/register", json={
            "email": email,
            "password": PASSWORD,
            "name": name,
            "company_name": "Test Properties",
        })
        assert response.status_code == 201, response.text
        data = response.json()
        return data["account"], {"Authorization": f"Bearer {data['access_token']}"}

    return _register


@pytest.fixture
async def test_account(register) -> dict:
    account, headers = await register()
    account["headers"] = headers
    return account


@pytest.fixture
def auth_headers(test_account: dict) -> dict:
    """Generate auth headers for the test account"""
    return test_account["headers"]


def tenant_payload(**overrides) -> dict:
    payload = {
        "name": "Jane Renter",
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "rent_amount": 1500,
        "rent_due_day": 1,
        "lease_start": "2024-01-01",
        "lease_end": "2024-12-31",
    }
    payload.update(overrides)
    return payload


def property_payload(**overrides) -> dict:
    payload = {
        "name": "Maple House",
        "property_type": "house",
        "address": {"street": "1 Maple St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
        "financial": {"market_rent": 1800},
    }
    payload.update(overrides)
    return payload
