"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, Type
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC, abstractmethod

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    @abstractmethod
    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by ID.

        Subclasses implement this with their specific ID field (product_id, ...).
        """

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: UUID) -> bool:
        """Delete entity by ID"""
        entity = self.get_by_id(entity_id)
        if entity:
            self.db.delete(entity)
            self.db.commit()
            return True
        return False

    def exists(self, entity_id: UUID) -> bool:
        """Check if entity exists"""
        return self.get_by_id(entity_id) is not None
