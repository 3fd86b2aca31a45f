"""Tests for style create/read/update/delete rules."""

import pytest

from clubs_api.core.errors import (
    ConcurrencyConflictError,
    KeyMismatchError,
    NotFoundError,
    ValidationFailedError,
)
from clubs_api.schemas.reference import StyleCreate, StyleUpdate
from clubs_api.services.styles import StyleService


@pytest.mark.asyncio
async def test_list_returns_every_style(session):
    styles = await StyleService(session).list()

    assert sorted(s.style_name for s in styles) == ["Classic", "Modern"]


@pytest.mark.asyncio
async def test_create_and_get(session):
    service = StyleService(session)

    await service.create(StyleCreate(style_name="Vintage", description="Archive reissue"))
    style = await service.get("Vintage")

    assert style.description == "Archive reissue"
    assert style.row_version == 1


@pytest.mark.asyncio
async def test_duplicate_name_is_caught_by_the_store(session):
    with pytest.raises(ValidationFailedError) as excinfo:
        await StyleService(session).create(StyleCreate(style_name="Classic"))

    assert list(excinfo.value.errors) == ["style_name"]
    assert len(await StyleService(session).list()) == 2


@pytest.mark.asyncio
async def test_update_round_trip(session):
    service = StyleService(session)

    await service.update("Modern", StyleUpdate(style_name="Modern", description="Updated", row_version=1))
    style = await service.get("Modern")

    assert style.description == "Updated"
    assert style.row_version == 2


@pytest.mark.asyncio
async def test_update_rejects_renaming(session):
    with pytest.raises(KeyMismatchError):
        await StyleService(session).update("Modern", StyleUpdate(style_name="Contemporary"))


@pytest.mark.asyncio
async def test_update_with_stale_version_conflicts(session):
    with pytest.raises(ConcurrencyConflictError):
        await StyleService(session).update("Modern", StyleUpdate(style_name="Modern", row_version=5))


@pytest.mark.asyncio
async def test_update_missing_style_is_not_found(session):
    with pytest.raises(NotFoundError):
        await StyleService(session).update("Gothic", StyleUpdate(style_name="Gothic"))


@pytest.mark.asyncio
async def test_delete_then_confirm_is_not_found(session):
    service = StyleService(session)
    await service.delete("Classic")

    with pytest.raises(NotFoundError):
        await service.confirm_delete("Classic")
