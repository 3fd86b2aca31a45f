from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.core.errors import NotFoundError
from clubs_api.core.session_scope import COUNTRY_CODE_KEY, COUNTRY_NAME_KEY, SessionScope
from clubs_api.db.models.reference import Province
from clubs_api.repositories.reference import CountryRepository, ProvinceRepository
from clubs_api.schemas.reference import ProvinceCreate
from clubs_api.services.base import BaseService
from clubs_api.services.entities import EntityFacade, EntityPolicy, FieldErrors, add_error

logger = logging.getLogger(__name__)

NO_COUNTRY_MESSAGE = "Please select a country to view provinces"


class ProvincePolicy(EntityPolicy[Province]):
    """Provinces are unique by code and by name, and must belong to a known country."""

    entity_name = "Province"
    key_field = "province_code"
    precheck = True

    def build(self, payload: ProvinceCreate) -> Province:
        return Province(
            province_code=payload.province_code,
            name=payload.name,
            country_code=payload.country_code,
            sales_tax_code=payload.sales_tax_code,
            sales_tax=payload.sales_tax,
            includes_federal_tax=payload.includes_federal_tax,
            first_postal_letter=payload.first_postal_letter,
        )

    async def find_conflicts(
        self, repo: ProvinceRepository, payload: ProvinceCreate, *, exclude_key: Optional[str] = None
    ) -> FieldErrors:
        errors: FieldErrors = {}

        same_name = [p for p in await repo.find_by_name(payload.name) if p.province_code != exclude_key]
        if same_name:
            add_error(errors, "name", f"The province {payload.name} already exists. Please try again.")

        if exclude_key is None and await repo.exists(payload.province_code):
            add_error(
                errors,
                "province_code",
                f"The province code {payload.province_code} already exists. Please try again.",
            )

        country = await CountryRepository(repo.session).get_country(payload.country_code)
        if country is None:
            add_error(errors, "country_code", f"The country code {payload.country_code} does not exist.")

        return errors


class ProvinceService(EntityFacade[Province]):
    """Create/read/update/delete for provinces; reads include the owning country."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProvinceRepository(session), ProvincePolicy())


@dataclass(frozen=True)
class CountryResolution:
    """
    Outcome of resolving which country's provinces to list.

    source is "path", "query" or "session"; None means no country could be
    resolved, in which case message tells the client to pick one and no
    provinces were queried.
    """

    source: Optional[str]
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    provinces: List[Province] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.source is not None


def _present(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CountryContextResolver(BaseService):
    """
    Decide which country scopes a province listing.

    Precedence: an explicit country in the path (remembered in the session),
    then a one-off query parameter, then the country remembered in the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.countries = CountryRepository(session)
        self.provinces = ProvinceRepository(session)

    # PUBLIC_INTERFACE
    async def resolve(
        self,
        scope: SessionScope,
        *,
        path_country_code: Optional[str] = None,
        query_country_code: Optional[str] = None,
    ) -> CountryResolution:
        """
        Resolve the active country and load its provinces ordered by name.

        Only the path branch writes countryCode/countryName to the session.

        Raises:
            NotFoundError: the path names a country that does not exist.
        """
        path_code = _present(path_country_code)
        if path_code is not None:
            country = await self.countries.get_country(path_code)
            if country is None:
                raise NotFoundError("Country", path_code)
            scope.set_string(COUNTRY_CODE_KEY, country.country_code)
            scope.set_string(COUNTRY_NAME_KEY, country.name)
            logger.info("Selected country %s (%s)", country.country_code, country.name)
            return CountryResolution(
                source="path",
                country_code=country.country_code,
                country_name=country.name,
                provinces=await self.provinces.list_for_country(country.country_code),
            )

        query_code = _present(query_country_code)
        if query_code is not None:
            return CountryResolution(
                source="query",
                country_code=query_code,
                provinces=await self.provinces.list_for_country(query_code),
            )

        session_code = _present(scope.get_string(COUNTRY_CODE_KEY))
        if session_code is None:
            logger.info("No country selected for province listing")
            return CountryResolution(source=None, message=NO_COUNTRY_MESSAGE)

        return CountryResolution(
            source="session",
            country_code=session_code,
            country_name=scope.get_string(COUNTRY_NAME_KEY),
            provinces=await self.provinces.list_for_country(session_code),
        )
