from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.core.deps import get_session_scope
from clubs_api.core.errors import NotFoundError
from clubs_api.core.session_scope import MESSAGE_KEY, MappingSessionScope
from clubs_api.db.session import get_async_session
from clubs_api.repositories.reference import CountryRepository
from clubs_api.schemas.reference import CountryIndex, CountryRead

router = APIRouter(prefix="/countries", tags=["Countries"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=CountryIndex,
    summary="List countries",
    description="List countries ordered by name, with any advisory message left for this client.",
)
async def list_countries(
    session: AsyncSession = Depends(get_async_session),
    scope: MappingSessionScope = Depends(get_session_scope),
) -> CountryIndex:
    repo = CountryRepository(session)
    countries = await repo.list_countries()
    return CountryIndex(
        message=scope.pop_string(MESSAGE_KEY),
        countries=[CountryRead.model_validate(c) for c in countries],
    )


# PUBLIC_INTERFACE
@router.get(
    "/{country_code}",
    response_model=CountryRead,
    summary="Get country",
)
async def get_country(
    country_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> CountryRead:
    repo = CountryRepository(session)
    country = await repo.get_country(country_code)
    if not country:
        raise NotFoundError("Country", country_code)
    return CountryRead.model_validate(country)
