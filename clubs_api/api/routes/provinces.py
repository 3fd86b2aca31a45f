from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.core.deps import get_session_scope, verify_csrf_token
from clubs_api.core.session_scope import MESSAGE_KEY, MappingSessionScope
from clubs_api.db.session import get_async_session
from clubs_api.schemas.reference import (
    ProvinceCreate,
    ProvinceListing,
    ProvinceRead,
    ProvinceUpdate,
)
from clubs_api.services.provinces import CountryContextResolver, CountryResolution, ProvinceService

router = APIRouter(prefix="/provinces", tags=["Provinces"])


def _listing_or_redirect(request: Request, resolution: CountryResolution, scope: MappingSessionScope):
    if not resolution.resolved:
        scope.set_string(MESSAGE_KEY, resolution.message or "")
        return RedirectResponse(
            url=str(request.url_for("list_countries")), status_code=status.HTTP_303_SEE_OTHER
        )
    return ProvinceListing(
        country_code=resolution.country_code,
        country_name=resolution.country_name,
        source=resolution.source,
        provinces=[ProvinceRead.model_validate(p) for p in resolution.provinces],
    )


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ProvinceListing,
    summary="List provinces",
    description=(
        "List provinces of the country given by the CountryCode query parameter, or else of the "
        "country remembered in the session, ordered by name. Redirects to the country list with "
        "an advisory message when neither is available."
    ),
    responses={303: {"description": "No country selected; redirect to the country list"}},
)
async def list_provinces(
    request: Request,
    country_code: str | None = Query(None, alias="CountryCode", description="One-off country filter"),
    session: AsyncSession = Depends(get_async_session),
    scope: MappingSessionScope = Depends(get_session_scope),
):
    resolver = CountryContextResolver(session)
    resolution = await resolver.resolve(scope, query_country_code=country_code)
    return _listing_or_redirect(request, resolution, scope)


# PUBLIC_INTERFACE
@router.get(
    "/country/{country_code}",
    response_model=ProvinceListing,
    summary="List provinces of a country",
    description="List provinces of the given country ordered by name and remember the country in the session.",
)
async def list_provinces_for_country(
    request: Request,
    country_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
    scope: MappingSessionScope = Depends(get_session_scope),
):
    resolver = CountryContextResolver(session)
    resolution = await resolver.resolve(scope, path_country_code=country_code)
    return _listing_or_redirect(request, resolution, scope)


# PUBLIC_INTERFACE
@router.get(
    "/{province_code}",
    response_model=ProvinceRead,
    summary="Get province",
)
async def get_province(
    province_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> ProvinceRead:
    province = await ProvinceService(session).get(province_code)
    return ProvinceRead.model_validate(province)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=ProvinceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create province",
    description="Create a province. Duplicate names and codes are all reported together as field errors.",
    dependencies=[Depends(verify_csrf_token)],
)
async def create_province(
    payload: ProvinceCreate,
    session: AsyncSession = Depends(get_async_session),
) -> ProvinceRead:
    created = await ProvinceService(session).create(payload)
    return ProvinceRead.model_validate(created)


# PUBLIC_INTERFACE
@router.put(
    "/{province_code}",
    response_model=ProvinceRead,
    summary="Update province",
    description="Update a province in place. The code in the path must match the payload.",
    dependencies=[Depends(verify_csrf_token)],
)
async def update_province(
    payload: ProvinceUpdate,
    province_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> ProvinceRead:
    updated = await ProvinceService(session).update(province_code, payload)
    return ProvinceRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.get(
    "/{province_code}/delete",
    response_model=ProvinceRead,
    summary="Confirm province deletion",
    description="Return the province that a subsequent DELETE would remove.",
)
async def confirm_delete_province(
    province_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> ProvinceRead:
    province = await ProvinceService(session).confirm_delete(province_code)
    return ProvinceRead.model_validate(province)


# PUBLIC_INTERFACE
@router.delete(
    "/{province_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete province",
    dependencies=[Depends(verify_csrf_token)],
)
async def delete_province(
    province_code: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    await ProvinceService(session).delete(province_code)
