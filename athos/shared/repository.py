"""Base repository pattern for data access.

Module repositories inherit from BaseRepository so that data access stays
separate from business logic.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from athos.shared.database import Base

# Generic type for SQLAlchemy models
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(ABC, Generic[ModelT]):
    """Base repository providing common read/write operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session

    @property
    @abstractmethod
    def _model_class(self) -> type[ModelT]:
        """Return the SQLAlchemy model class for this repository."""
        pass

    async def get_by_id(self, id: Any) -> ModelT | None:
        """Get a single entity by primary key.

        Args:
            id: Entity primary key

        Returns:
            Entity if found, None otherwise
        """
        return await self._session.get(self._model_class, id)

    async def add(self, entity: ModelT) -> ModelT:
        """Stage a new entity and flush it.

        Args:
            entity: Entity to create

        Returns:
            The flushed entity
        """
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def merge(self, entity: ModelT) -> ModelT:
        """Insert or update an entity by primary key."""
        merged = await self._session.merge(entity)
        await self._session.flush()
        return merged
