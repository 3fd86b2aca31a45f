from __future__ import annotations

from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import Executable, delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from clubs_api.core.errors import ConcurrencyConflictError

ModelT = TypeVar("ModelT")


class BaseRepository:
    """
    Base class for repositories providing common helpers.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Roll back current transaction."""
        await self.session.rollback()

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)


class KeyedRepository(BaseRepository, Generic[ModelT]):
    """
    Repository for an entity identified by a single natural string key and
    carrying a row_version column for optimistic concurrency.

    Subclasses set ``model``, ``key_name`` and ``entity_name``.
    """

    model: Type[ModelT]
    key_name: str
    entity_name: str = "Entity"

    def key_column(self) -> InstrumentedAttribute:
        # Mapped attributes must be read from the model class, not through this instance
        return getattr(self.model, self.key_name)

    def _select(self):
        return select(self.model)

    async def list_all(self) -> List[ModelT]:
        res = await self.scalars(self._select())
        return list(res.unique())

    async def get(self, key: str) -> Optional[ModelT]:
        stmt = (
            self._select()
            .where(self.key_column() == key)
            .execution_options(populate_existing=True)
        )
        res = await self.execute(stmt)
        return res.unique().scalar_one_or_none()

    async def exists(self, key: str) -> bool:
        stmt = select(exists().where(self.key_column() == key))
        result = await self.execute(stmt)
        return bool(result.scalar())

    async def find_by(self, column: InstrumentedAttribute, value: Any) -> List[ModelT]:
        stmt = select(self.model).where(column == value)
        res = await self.scalars(stmt)
        return list(res)

    async def insert(self, row: ModelT) -> ModelT:
        await self.add(row)
        await self.commit()
        return row

    async def update_values(
        self, key: str, values: dict[str, Any], *, expected_version: Optional[int] = None
    ) -> None:
        """
        Update a row in place and bump its row_version.

        Raises:
            ConcurrencyConflictError: no row matched the key (and expected
            version, when given).
        """
        row_version = getattr(self.model, "row_version")
        stmt = update(self.model).where(self.key_column() == key)
        if expected_version is not None:
            stmt = stmt.where(row_version == expected_version)
        stmt = stmt.values(**values, row_version=row_version + 1).execution_options(
            synchronize_session=False
        )
        result = await self.execute(stmt)
        if result.rowcount == 0:
            await self.rollback()
            raise ConcurrencyConflictError(self.entity_name, key, expected_version)
        await self.commit()

    async def delete_by_key(self, key: str) -> int:
        """Delete the row with this key; returns the number of rows removed."""
        stmt = delete(self.model).where(self.key_column() == key).execution_options(
            synchronize_session=False
        )
        result = await self.execute(stmt)
        await self.commit()
        return int(result.rowcount or 0)
