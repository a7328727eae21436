"""
Base Repository implementation.
Provides common data access patterns over a single SQLAlchemy model.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Sequence

from sqlalchemy import Select, select, func
from sqlalchemy.orm import Session


ModelT = TypeVar("ModelT")


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - _base_query(): Return base query with eager loading and default ordering
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """
        Return base query with proper eager loading.
        Subclasses must implement this with selectinload/joinedload.
        """
        ...

    def find_all(self) -> Sequence[ModelT]:
        """Find all entities in default order."""
        return self._db.execute(self._base_query()).scalars().unique().all()

    def find_by_id(self, entity_id: int) -> ModelT | None:
        """Find entity by ID."""
        query = self._base_query().where(self.model.id == entity_id)
        return self._db.scalar(query)

    def count(self) -> int:
        """Count all entities."""
        return self._db.scalar(select(func.count()).select_from(self.model)) or 0

    def add(self, entity: ModelT) -> ModelT:
        """Stage a new entity and flush to obtain its ID."""
        self._db.add(entity)
        self._db.flush()
        return entity
