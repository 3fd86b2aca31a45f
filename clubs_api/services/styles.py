from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.db.models.reference import Style
from clubs_api.repositories.reference import StyleRepository
from clubs_api.schemas.reference import StyleCreate
from clubs_api.services.entities import EntityFacade, EntityPolicy, FieldErrors, add_error


class StylePolicy(EntityPolicy[Style]):
    """Styles are unique by name only; the primary key constraint enforces it."""

    entity_name = "Style"
    key_field = "style_name"

    def build(self, payload: StyleCreate) -> Style:
        return Style(style_name=payload.style_name, description=payload.description)

    async def find_conflicts(
        self, repo: StyleRepository, payload: StyleCreate, *, exclude_key: Optional[str] = None
    ) -> FieldErrors:
        errors: FieldErrors = {}
        if exclude_key is None and await repo.exists(payload.style_name):
            add_error(errors, "style_name", f"The style {payload.style_name} already exists.")
        return errors


class StyleService(EntityFacade[Style]):
    """Create/read/update/delete for styles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StyleRepository(session), StylePolicy())
