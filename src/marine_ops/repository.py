"""
Generic async CRUD helpers shared by the domain managers.

Each manager owns one session and any number of ``Repository`` objects,
one per model it touches.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marine_ops.models.base import Base
from marine_ops.exceptions import NotFoundError

ModelType = TypeVar("ModelType", bound=Base)


class Repository(Generic[ModelType]):
    """CRUD operations for a single model class."""

    def __init__(self, session: AsyncSession, model: Type[ModelType], label: Optional[str] = None):
        """
        Args:
            session: Async session used for every query
            model: Declarative model class
            label: Human readable name used in not-found errors
        """
        self.session = session
        self.model = model
        self.label = label or model.__name__

    async def get(self, entity_id: int) -> ModelType:
        """Fetch by primary key or raise ``NotFoundError``."""
        entity = await self.session.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError.for_entity(self.label, entity_id)
        return entity

    async def list(self, *criteria, order_by=None, offset: int = 0,
                   limit: Optional[int] = None) -> List[ModelType]:
        query = select(self.model).where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create(self, **values: Any) -> ModelType:
        entity = self.model(**values)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity_id: int, changes: Dict[str, Any]) -> ModelType:
        entity = await self.get(entity_id)
        for field, value in changes.items():
            setattr(entity, field, value)
        await self.session.flush()
        return entity

    async def delete(self, entity_id: int) -> ModelType:
        entity = await self.get(entity_id)
        await self.session.delete(entity)
        await self.session.flush()
        return entity
