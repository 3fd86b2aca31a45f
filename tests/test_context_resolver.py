"""Tests for choosing which country's provinces to list."""

from unittest.mock import AsyncMock

import pytest

from clubs_api.core.errors import NotFoundError
from clubs_api.core.session_scope import COUNTRY_CODE_KEY, COUNTRY_NAME_KEY, MappingSessionScope
from clubs_api.services.provinces import NO_COUNTRY_MESSAGE, CountryContextResolver


def _names(resolution):
    return [p.name for p in resolution.provinces]


@pytest.mark.asyncio
async def test_path_country_is_remembered_in_session(session):
    scope = MappingSessionScope()

    result = await CountryContextResolver(session).resolve(scope, path_country_code="CA")

    assert result.source == "path"
    assert result.country_name == "Canada"
    assert scope.get_string(COUNTRY_CODE_KEY) == "CA"
    assert scope.get_string(COUNTRY_NAME_KEY) == "Canada"
    assert _names(result) == ["Alberta", "British Columbia", "Ontario", "Quebec"]
    assert all(p.country.name == "Canada" for p in result.provinces)


@pytest.mark.asyncio
async def test_path_country_overwrites_previous_selection(session):
    scope = MappingSessionScope({COUNTRY_CODE_KEY: "CA", COUNTRY_NAME_KEY: "Canada"})

    result = await CountryContextResolver(session).resolve(scope, path_country_code="US")

    assert scope.as_dict() == {COUNTRY_CODE_KEY: "US", COUNTRY_NAME_KEY: "United States"}
    assert _names(result) == ["Alabama", "Michigan", "New York"]


@pytest.mark.asyncio
async def test_unknown_path_country_fails_without_touching_session(session):
    scope = MappingSessionScope({COUNTRY_CODE_KEY: "CA", COUNTRY_NAME_KEY: "Canada"})

    with pytest.raises(NotFoundError):
        await CountryContextResolver(session).resolve(scope, path_country_code="ZZ")

    assert scope.get_string(COUNTRY_CODE_KEY) == "CA"


@pytest.mark.asyncio
async def test_query_country_does_not_update_session(session):
    scope = MappingSessionScope({COUNTRY_CODE_KEY: "CA", COUNTRY_NAME_KEY: "Canada"})

    result = await CountryContextResolver(session).resolve(scope, query_country_code="US")

    assert result.source == "query"
    assert _names(result) == ["Alabama", "Michigan", "New York"]
    assert scope.as_dict() == {COUNTRY_CODE_KEY: "CA", COUNTRY_NAME_KEY: "Canada"}


@pytest.mark.asyncio
async def test_path_takes_precedence_over_query(session):
    scope = MappingSessionScope()

    result = await CountryContextResolver(session).resolve(
        scope, path_country_code="CA", query_country_code="US"
    )

    assert result.source == "path"
    assert result.country_code == "CA"


@pytest.mark.asyncio
async def test_session_country_used_when_no_parameters(session):
    scope = MappingSessionScope({COUNTRY_CODE_KEY: "US", COUNTRY_NAME_KEY: "United States"})
    before = scope.as_dict()

    result = await CountryContextResolver(session).resolve(scope)

    assert result.source == "session"
    assert result.country_name == "United States"
    assert _names(result) == ["Alabama", "Michigan", "New York"]
    assert scope.as_dict() == before


@pytest.mark.asyncio
async def test_blank_query_falls_back_to_session(session):
    scope = MappingSessionScope({COUNTRY_CODE_KEY: "US"})

    result = await CountryContextResolver(session).resolve(scope, query_country_code="  ")

    assert result.source == "session"


@pytest.mark.asyncio
async def test_no_country_anywhere_asks_for_selection_without_querying(session):
    resolver = CountryContextResolver(session)
    resolver.provinces.list_for_country = AsyncMock()
    scope = MappingSessionScope()

    result = await resolver.resolve(scope)

    assert not result.resolved
    assert result.message == NO_COUNTRY_MESSAGE
    assert result.provinces == []
    resolver.provinces.list_for_country.assert_not_awaited()
    assert scope.as_dict() == {}


@pytest.mark.asyncio
async def test_country_without_provinces_lists_nothing(session):
    result = await CountryContextResolver(session).resolve(MappingSessionScope(), path_country_code="MX")

    assert result.resolved
    assert result.provinces == []
