from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from clubs_api.db.models.reference import Country, Province, Style
from .base import BaseRepository, KeyedRepository


class CountryRepository(BaseRepository):
    """Repository for countries (read-only reference data)."""

    async def list_countries(self) -> List[Country]:
        stmt = select(Country).order_by(Country.name)
        res = await self.scalars(stmt)
        return list(res)

    async def get_country(self, country_code: str) -> Optional[Country]:
        stmt = select(Country).where(Country.country_code == country_code)
        return await self.scalar_one_or_none(stmt)


class ProvinceRepository(KeyedRepository[Province]):
    """Repository for provinces; reads always join the owning country."""

    model = Province
    key_name = "province_code"
    entity_name = "Province"

    def _select(self):
        return select(Province).options(joinedload(Province.country))

    async def list_for_country(self, country_code: str) -> List[Province]:
        stmt = (
            self._select()
            .where(Province.country_code == country_code)
            .order_by(Province.name.asc())
        )
        res = await self.scalars(stmt)
        return list(res.unique())

    async def find_by_name(self, name: str) -> List[Province]:
        return await self.find_by(Province.name, name)


class StyleRepository(KeyedRepository[Style]):
    """Repository for styles."""

    model = Style
    key_name = "style_name"
    entity_name = "Style"
