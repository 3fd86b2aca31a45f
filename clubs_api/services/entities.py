from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.core.errors import (
    ConcurrencyConflictError,
    KeyMismatchError,
    NotFoundError,
    ValidationFailedError,
)
from clubs_api.repositories.base import KeyedRepository
from clubs_api.services.base import BaseService

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
FieldErrors = Dict[str, List[str]]


def add_error(errors: FieldErrors, field: str, message: str) -> None:
    """Append a field-level message, keeping earlier ones for the same field."""
    errors.setdefault(field, []).append(message)


class EntityPolicy(ABC, Generic[ModelT]):
    """
    Per-entity rules plugged into EntityFacade.

    Attributes:
        entity_name: label used in messages and logs
        key_field: payload attribute holding the natural key
        precheck: run find_conflicts before inserting (otherwise the store's
            constraints are the only check and conflicts surface on commit)
    """

    entity_name: str = "Entity"
    key_field: str = "id"
    precheck: bool = False

    def key_of(self, payload: BaseModel) -> str:
        return getattr(payload, self.key_field)

    @abstractmethod
    def build(self, payload: BaseModel) -> ModelT:
        """Return a new, unsaved row for the payload."""

    def update_values(self, payload: BaseModel) -> Dict[str, Any]:
        """Column values written by an update; the key and version are never rewritten."""
        return payload.model_dump(exclude={self.key_field, "row_version"})

    async def find_conflicts(
        self, repo: KeyedRepository[ModelT], payload: BaseModel, *, exclude_key: Optional[str] = None
    ) -> FieldErrors:
        """
        Check the payload against existing rows and return every violation found.

        exclude_key names the row being updated, which must not conflict with itself.
        """
        return {}


class EntityFacade(BaseService, Generic[ModelT]):
    """
    Create/read/update/delete contract for one keyed entity type.

    Missing rows raise NotFoundError, rejected payloads raise
    ValidationFailedError, and a concurrency conflict on a row that still
    exists is re-raised to the caller unchanged.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: KeyedRepository[ModelT],
        policy: EntityPolicy[ModelT],
    ) -> None:
        super().__init__(session)
        self.repo = repo
        self.policy = policy

    # PUBLIC_INTERFACE
    async def list(self) -> List[ModelT]:
        """Return every row (unordered)."""
        return await self.repo.list_all()

    # PUBLIC_INTERFACE
    async def get(self, key: str) -> ModelT:
        """Return the row for key or raise NotFoundError."""
        row = await self.repo.get(key)
        if row is None:
            raise NotFoundError(self.policy.entity_name, key)
        return row

    # PUBLIC_INTERFACE
    async def create(self, payload: BaseModel) -> ModelT:
        """
        Validate and insert a new row.

        Raises:
            ValidationFailedError: with all field errors found; nothing is persisted.
        """
        key = self.policy.key_of(payload)
        if self.policy.precheck:
            errors = await self.policy.find_conflicts(self.repo, payload)
            if errors:
                self._reject(key, errors, payload)

        try:
            await self.repo.insert(self.policy.build(payload))
        except IntegrityError:
            await self.repo.rollback()
            errors = await self.policy.find_conflicts(self.repo, payload)
            if not errors:
                errors = {self.policy.key_field: [f"{self.policy.entity_name} '{key}' could not be saved."]}
            self._reject(key, errors, payload)

        logger.info("Created %s '%s'", self.policy.entity_name, key)
        return await self.get(key)

    # PUBLIC_INTERFACE
    async def update(self, key: str, payload: BaseModel) -> ModelT:
        """
        Update the row for key in place with the payload's fields.

        Raises:
            KeyMismatchError: the payload key differs from key (checked before any write).
            NotFoundError: the row no longer exists.
            ConcurrencyConflictError: the row exists but changed since the client read it.
            ValidationFailedError: the store rejected the values (e.g. a unique constraint).
        """
        payload_key = self.policy.key_of(payload)
        if payload_key != key:
            raise KeyMismatchError(self.policy.entity_name, key, payload_key)

        expected_version = getattr(payload, "row_version", None)
        try:
            await self.repo.update_values(
                key, self.policy.update_values(payload), expected_version=expected_version
            )
        except ConcurrencyConflictError:
            if not await self.repo.exists(key):
                raise NotFoundError(self.policy.entity_name, key) from None
            logger.error(
                "Concurrency conflict updating %s '%s' (expected version %s)",
                self.policy.entity_name,
                key,
                expected_version,
            )
            raise
        except IntegrityError:
            await self.repo.rollback()
            errors = await self.policy.find_conflicts(self.repo, payload, exclude_key=key)
            if not errors:
                errors = {"__all__": [f"{self.policy.entity_name} '{key}' could not be saved."]}
            self._reject(key, errors, payload)

        logger.info("Updated %s '%s'", self.policy.entity_name, key)
        return await self.get(key)

    # PUBLIC_INTERFACE
    async def confirm_delete(self, key: str) -> ModelT:
        """Read the row shown to the user before a delete; NotFoundError if absent."""
        return await self.get(key)

    # PUBLIC_INTERFACE
    async def delete(self, key: str) -> None:
        """
        Delete the row for key.

        The delete is conditional on the row still existing; if it vanished
        after the confirmation read, NotFoundError is raised.
        """
        removed = await self.repo.delete_by_key(key)
        if not removed:
            raise NotFoundError(self.policy.entity_name, key)
        logger.info("Deleted %s '%s'", self.policy.entity_name, key)

    def _reject(self, key: str, errors: FieldErrors, payload: BaseModel) -> None:
        logger.warning(
            "Rejected %s '%s': %s", self.policy.entity_name, key, "; ".join(
                f"{field}: {', '.join(msgs)}" for field, msgs in errors.items()
            )
        )
        raise ValidationFailedError(errors, payload.model_dump(mode="json"))
