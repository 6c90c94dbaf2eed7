# medprep/core/base_dao.py
"""Generic base DAO for common database operations."""

from typing import Generic, TypeVar, List, Optional, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy import select, and_
from abc import ABC
from medprep.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseDAO(Generic[ModelType], ABC):
    """Generic DAO for common database operations.

    Methods are coroutines so services can await every store access; the
    underlying session is synchronous.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def _filter_conditions(self, filters: dict) -> list:
        return [
            getattr(self.model, key) == value
            for key, value in filters.items()
            if hasattr(self.model, key) and value is not None
        ]

    async def get_all(self, skip: int = 0, limit: Optional[int] = None, **filters) -> List[ModelType]:
        """Get all records with optional filtering."""
        query = select(self.model)

        conditions = self._filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get record by primary key."""
        return self.db.get(self.model, id)

    async def create(self, db_obj: ModelType) -> ModelType:
        """Persist a new record."""
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    async def update(self, db_obj: ModelType, **data) -> ModelType:
        """Update existing record."""
        for field, value in data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    async def delete(self, id: Any) -> bool:
        """Delete record by primary key."""
        db_obj = await self.get_by_id(id)
        if db_obj:
            self.db.delete(db_obj)
            self.db.commit()
            return True
        return False

