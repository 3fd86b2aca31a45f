"""
Pytest configuration and fixtures for the clubs API tests.

Each test gets a fresh SQLite database file (aiosqlite driver) seeded with a
few countries, provinces and styles.
"""

import os

# Keep app startup side effects out of the tests; must be set before importing the app
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("AUTO_SEED", "false")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from clubs_api.api.main import app
from clubs_api.db.base import Base
from clubs_api.db.models.reference import Country, Province, Style
from clubs_api.db.session import build_engine, get_async_session


def _sample_rows():
    # Inserted out of name order so ordering is observable
    return [
        Country(country_code="CA", name="Canada"),
        Country(country_code="US", name="United States"),
        Country(country_code="MX", name="Mexico"),
        Province(province_code="QC", name="Quebec", country_code="CA", sales_tax_code="QST",
                 sales_tax=0.09975, includes_federal_tax=False, first_postal_letter="GHJ"),
        Province(province_code="ON", name="Ontario", country_code="CA", sales_tax_code="HST",
                 sales_tax=0.13, includes_federal_tax=True, first_postal_letter="KLMNP"),
        Province(province_code="BC", name="British Columbia", country_code="CA", sales_tax_code="PST",
                 sales_tax=0.07, includes_federal_tax=False, first_postal_letter="V"),
        Province(province_code="AB", name="Alberta", country_code="CA", sales_tax_code="GST",
                 sales_tax=0.0, includes_federal_tax=False, first_postal_letter="T"),
        Province(province_code="NY", name="New York", country_code="US", sales_tax_code="ST",
                 sales_tax=0.04, includes_federal_tax=False),
        Province(province_code="MI", name="Michigan", country_code="US", sales_tax_code="ST",
                 sales_tax=0.06, includes_federal_tax=False),
        Province(province_code="AL", name="Alabama", country_code="US", sales_tax_code="ST",
                 sales_tax=0.04, includes_federal_tax=False),
        Style(style_name="Modern", description="Clean lines"),
        Style(style_name="Classic", description="Traditional cut"),
    ]


@pytest.fixture
def database_url(tmp_path) -> str:
    """Create and seed a SQLite database file; return its async URL."""
    path = tmp_path / "clubs.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(_sample_rows())
        session.commit()
    engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def session_maker(database_url):
    # NullPool: connections are opened on whichever event loop uses them
    engine = build_engine(database_url, poolclass=NullPool)
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
def client(session_maker):
    async def _session_override():
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_async_session] = _session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def csrf_headers(client) -> dict:
    token = client.get("/api/v1/csrf-token").json()["csrf_token"]
    return {"X-CSRF-Token": token}
