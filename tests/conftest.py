"""Test fixtures and configuration."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.main import create_app
from src.registrations.service import RegistrationService
from src.repositories.sql import SqlRegistrationStore
from tests.factories import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'registrations.db'}"


@pytest_asyncio.fixture
async def sql_store(database_url):
    """Opened SQL store on a temporary SQLite file."""
    store = SqlRegistrationStore(database_url)
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def service(sql_store, clock):
    return RegistrationService(sql_store, clock=clock)


@pytest.fixture
def client(database_url, clock):
    """API client backed by a fresh SQL store; lifespan runs inside the context."""
    app = create_app(store=SqlRegistrationStore(database_url), clock=clock)
    with TestClient(app) as test_client:
        yield test_client
