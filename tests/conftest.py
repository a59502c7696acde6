"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from inventory_backend.core.config import Settings
from inventory_backend.db.database import create_db_and_tables, make_engine, make_session_maker
from inventory_backend.main import create_app
from inventory_backend.schemas.product import ProductCreate


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a fresh SQLite file per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'inventory.sqlite'}")
    monkeypatch.setenv("DEFAULT_ACTOR", "admin")
    return Settings()


@pytest.fixture
async def engine(settings):
    engine = make_engine(settings)
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    async with make_session_maker(engine)() as session:
        yield session


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def milk_payload():
    return ProductCreate(
        name="Milk",
        unit="l",
        category="Dairy",
        brand="FreshFarm",
        stock=10,
        status="In Stock",
    )
