"""Tests for idempotent reference-data seeding."""

import pytest

from clubs_api.db import seed
from clubs_api.db.models.reference import Province, Style


@pytest.mark.asyncio
async def test_seed_skips_names_taken_under_another_code(session, session_maker, monkeypatch):
    session.add(Province(province_code="NX", name="Nova Scotia", country_code="CA"))
    await session.commit()
    monkeypatch.setattr(seed, "get_session_maker", lambda: session_maker)

    await seed.seed_all()

    async with session_maker() as check:
        assert await check.get(Province, "NS") is None
        assert (await check.get(Province, "NX")).name == "Nova Scotia"
        assert await check.get(Province, "QC") is not None
        assert await check.get(Style, "Vintage") is not None


@pytest.mark.asyncio
async def test_seed_twice_leaves_existing_rows_alone(session_maker, monkeypatch):
    monkeypatch.setattr(seed, "get_session_maker", lambda: session_maker)

    await seed.seed_all()
    await seed.seed_all()

    async with session_maker() as check:
        assert (await check.get(Style, "Modern")).description == "Clean lines"
