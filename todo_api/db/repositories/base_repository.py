"""
Base repository - generic CRUD over a criteria dict (SOLID: Interface Segregation, Dependency Inversion).
Challenge: Consistent data access, testability via mocks, query composition in one place.
Design: Criteria are {column: value} equality predicates; services never build SQL themselves.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, false, select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

ASCENDING = 1
DESCENDING = -1

# Range of an INTEGER/BIGINT column; drivers refuse to bind anything wider
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# [(field, ASCENDING | DESCENDING), ...]
SortSpec = Sequence[tuple[str, int]]


def fits_int64(value: Any) -> bool:
    """True for non-integers and for integers a BIGINT column can hold."""
    if isinstance(value, bool) or not isinstance(value, int):
        return True
    return INT64_MIN <= value <= INT64_MAX


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific methods."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    def _where(self, criteria: Mapping[str, Any]) -> list:
        if not all(fits_int64(value) for value in criteria.values()):
            # No stored row can equal an out-of-range integer
            return [false()]
        return [getattr(self.model, field) == value for field, value in criteria.items()]

    def _order_by(self, sort: SortSpec) -> list:
        """Map sort keys onto columns. Fields the model does not have are ignored."""
        columns = self.model.__table__.columns
        clauses = []
        for field, direction in sort:
            if field not in columns:
                continue
            column = columns[field]
            clauses.append(column.desc() if direction == DESCENDING else column.asc())
        # Stable tiebreaker so the same query always pages the same way
        clauses.append(self.model.id.asc())
        return clauses

    async def get_by_id(self, id: int) -> ModelType | None:
        """Fetch single entity by primary key."""
        return await self.find_one(id=id)

    async def find_one(self, **criteria: Any) -> ModelType | None:
        result = await self.session.execute(select(self.model).where(*self._where(criteria)))
        return result.scalar_one_or_none()

    async def find_many(
        self,
        criteria: Mapping[str, Any],
        *,
        sort: SortSpec = (),
        limit: int | None = None,
        skip: int | None = None,
    ) -> list[ModelType]:
        """Filtered, ordered, optionally paginated list. None means no limit / no offset."""
        stmt = select(self.model).where(*self._where(criteria)).order_by(*self._order_by(sort))
        if skip is not None:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def insert(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()  # Get ID without committing
        await self.session.refresh(entity)
        return entity

    async def save(self, entity: ModelType) -> ModelType:
        """Flush pending attribute changes and reload server-side columns (updated_at)."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update_one(self, criteria: Mapping[str, Any], patch: Mapping[str, Any]) -> ModelType | None:
        """Apply patch to the single entity matching criteria. None if nothing matches."""
        entity = await self.find_one(**criteria)
        if entity is None:
            return None
        for field, value in patch.items():
            setattr(entity, field, value)
        return await self.save(entity)

    async def delete_one(self, **criteria: Any) -> ModelType | None:
        """Remove the entity matching criteria and return it. None if nothing matches."""
        entity = await self.find_one(**criteria)
        if entity is None:
            return None
        await self.session.delete(entity)
        await self.session.flush()
        return entity

    async def delete_many(self, **criteria: Any) -> int:
        """Bulk delete; returns number of rows removed."""
        result = await self.session.execute(delete(self.model).where(*self._where(criteria)))
        return result.rowcount or 0
