"""
Futelt Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the test suite.
How:   Stores are opened against tmp_path SQLite files or in memory; the app
       is driven through httpx's ASGITransport with an already opened store
       injected, so no lifespan or server is needed.

Fixtures:
    memory_settings / database_settings: Settings for each backend
    store:         parametrized over both backends, opened and closed per test
    sql_store:     SQLite-backed store only
    test_client:   AsyncClient against an app serving an in-memory store
    sql_client:    AsyncClient against an app serving a SQLite store
"""

import os

# Before any futelt import: the module-level Settings() reads the environment.
os.environ["STORE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from futelt.config import Settings
from futelt.database import build_engine
from futelt.main import create_app
from futelt.store import InMemoryMessageStore, SqlMessageStore


@pytest.fixture
def memory_settings():
    return Settings(store_backend="memory", log_level="WARNING")


@pytest.fixture
def database_settings(tmp_path):
    """Settings pointing at a fresh SQLite file for each test."""
    return Settings(
        store_backend="database",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'futelt.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def sql_store(database_settings):
    store = SqlMessageStore(build_engine(database_settings))
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "database"])
async def store(request, database_settings):
    """Each store-contract test runs once per backend."""
    if request.param == "memory":
        instance = InMemoryMessageStore()
    else:
        instance = SqlMessageStore(build_engine(database_settings))
    await instance.open()
    yield instance
    await instance.close()


@pytest_asyncio.fixture
async def test_client(memory_settings):
    """
    HTTP client for an app serving a fresh in-memory store.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    store = InMemoryMessageStore()
    await store.open()
    app = create_app(settings=memory_settings, store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sql_client(database_settings, sql_store):
    app = create_app(settings=database_settings, store=sql_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
