"""
Database seeding utilities for sample reference data.

Seeds:
- Countries (Canada, United States)
- A handful of provinces/states with their sales tax setup
- Example styles

Existing rows are left untouched, so seeding can run repeatedly.

Usage:
  python -m clubs_api.db.run_migrations upgrade head
  python -m clubs_api.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Sequence, Tuple, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.db.models.reference import Country, Province, Style
from clubs_api.db.session import get_session_maker

logger = logging.getLogger(__name__)

COUNTRIES: List[Tuple[str, str]] = [
    ("CA", "Canada"),
    ("US", "United States"),
]

PROVINCES: List[Dict[str, Any]] = [
    dict(province_code="ON", name="Ontario", country_code="CA", sales_tax_code="HST",
         sales_tax=0.13, includes_federal_tax=True, first_postal_letter="KLMNP"),
    dict(province_code="QC", name="Quebec", country_code="CA", sales_tax_code="QST",
         sales_tax=0.09975, includes_federal_tax=False, first_postal_letter="GHJ"),
    dict(province_code="BC", name="British Columbia", country_code="CA", sales_tax_code="PST",
         sales_tax=0.07, includes_federal_tax=False, first_postal_letter="V"),
    dict(province_code="NS", name="Nova Scotia", country_code="CA", sales_tax_code="HST",
         sales_tax=0.15, includes_federal_tax=True, first_postal_letter="B"),
    dict(province_code="NY", name="New York", country_code="US", sales_tax_code="ST",
         sales_tax=0.04, includes_federal_tax=False),
    dict(province_code="MI", name="Michigan", country_code="US", sales_tax_code="ST",
         sales_tax=0.06, includes_federal_tax=False),
]

STYLES: List[Tuple[str, str]] = [
    ("Classic", "Traditional cut and finish"),
    ("Modern", "Clean lines, contemporary materials"),
    ("Vintage", "Reissue of archive designs"),
]


async def _ensure(
    session: AsyncSession, model: Type, key: Any, *, unique: Sequence[str] = (), **values: Any
) -> bool:
    """
    Insert the row unless one with this primary key, or with the same value in
    any of the unique columns, exists; returns True if inserted.
    """
    if await session.get(model, key) is not None:
        return False
    for column in unique:
        stmt = select(model).where(getattr(model, column) == values[column])
        if (await session.execute(stmt)).first() is not None:
            logger.warning(
                "Skipping %s %r: %s %r is already taken", model.__name__, key, column, values[column]
            )
            return False
    session.add(model(**values))
    return True


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """Seed countries, provinces and styles in one transaction."""
    async with get_session_maker()() as session:
        inserted = 0
        for code, name in COUNTRIES:
            inserted += await _ensure(session, Country, code, country_code=code, name=name)
        # Provinces reference countries; flush so the FK targets exist
        await session.flush()
        for values in PROVINCES:
            inserted += await _ensure(session, Province, values["province_code"], unique=("name",), **values)
        for style_name, description in STYLES:
            inserted += await _ensure(session, Style, style_name, style_name=style_name, description=description)
        await session.commit()
        logger.info("Seeded %d reference rows", inserted)


if __name__ == "__main__":
    asyncio.run(seed_all())
