"""Pytest configuration and fixtures."""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from habitual.config import settings
from habitual.main import app
from habitual.services.plan_generator import get_plan_generator
from tests.factories import StubPlanGenerator, plan_json


@pytest.fixture(autouse=True)
def reference_timezone(monkeypatch):
    """Pin calendar-day math to UTC unless a test says otherwise."""
    monkeypatch.setattr(settings, "timezone", "UTC")


@pytest.fixture
def stub_generator():
    """Stub generator returning a 3-day plan."""
    return StubPlanGenerator(plan_json(3))


@pytest_asyncio.fixture
async def app_client(stub_generator):
    """
    Create a test client with a clean test database.

    This fixture:
    - Creates a test database connection (skips if MongoDB is unreachable)
    - Swaps the plan generator for a deterministic stub
    - Yields an async HTTP client for testing
    - Cleans up the test database after each test
    """
    # Create test database client
    test_client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=2000)
    try:
        await test_client.admin.command("ping")
    except PyMongoError:
        test_client.close()
        pytest.skip("MongoDB is not reachable")

    test_db_name = f"{settings.mongodb_db_name}_test"
    test_db = test_client[test_db_name]

    # Override the database and generator dependencies
    from habitual.database import database
    original_db = database.db
    database.db = test_db
    app.dependency_overrides[get_plan_generator] = lambda: stub_generator

    # Create HTTP client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    # Cleanup: drop test database
    await test_client.drop_database(test_db_name)

    # Restore original database
    app.dependency_overrides.pop(get_plan_generator, None)
    database.db = original_db
    test_client.close()
