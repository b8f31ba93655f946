"""Entity persistence over an async database session"""
from typing import Optional, Type, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from punks_indexer.models.database import Base

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore:
    """
    Load/save/delete by primary key.

    Writes are flushed immediately so a later load while handling the same
    event sees them. Committing is left to the caller that owns the session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, model: Type[ModelT], entity_id: str) -> Optional[ModelT]:
        """Return the entity with this id, or None when absent"""
        return await self.session.get(model, entity_id)

    async def save(self, entity: Base) -> None:
        """Insert or update an entity"""
        self.session.add(entity)
        await self.session.flush()

    async def delete(self, model: Type[Base], entity_id: str) -> bool:
        """Remove the entity with this id; returns False when nothing was there"""
        entity = await self.session.get(model, entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.flush()
        logger.debug("Deleted entity", model=model.__name__, id=entity_id)
        return True
