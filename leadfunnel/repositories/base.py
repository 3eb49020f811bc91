"""
Base repository with generic CRUD operations.
"""
import uuid
from typing import TypeVar, Generic, Type, Optional, List, Any
from datetime import datetime

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with CRUD operations.
    Inherit and specify the model class.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    def _scoped(self, query, company_id: Optional[uuid.UUID] = None, filters: Optional[dict] = None):
        """Apply company scope and equality filters to a query."""
        if company_id and hasattr(self.model, "company_id"):
            query = query.where(self.model.company_id == company_id)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.where(getattr(self.model, field) == value)
        return query

    async def create(self, obj_in: dict) -> ModelType:
        """Create a new record."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def get(self, id: uuid.UUID) -> Optional[ModelType]:
        """Get a record by ID."""
        return await self.session.get(self.model, id)

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """Get a record by a specific field."""
        query = select(self.model).where(getattr(self.model, field) == value)
        result = await self.session.exec(query)
        return result.first()

    async def list(
        self,
        company_id: Optional[uuid.UUID] = None,
        filters: Optional[dict] = None,
        order_by: str = "created_at",
        order_desc: bool = True,
        limit: Optional[int] = None
    ) -> List[ModelType]:
        """List all records with optional filters."""
        query = self._scoped(select(self.model), company_id, filters)

        if hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column)

        if limit:
            query = query.limit(limit)

        result = await self.session.exec(query)
        return result.all()

    async def update(self, id: uuid.UUID, obj_in: dict) -> Optional[ModelType]:
        """Update a record. Every key given is written, None included."""
        db_obj = await self.get(id)
        if not db_obj:
            return None

        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        # Update timestamp if exists
        if hasattr(db_obj, 'updated_at'):
            db_obj.updated_at = datetime.utcnow()

        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def count(self, company_id: Optional[uuid.UUID] = None, filters: Optional[dict] = None) -> int:
        """Count records."""
        query = self._scoped(select(func.count()).select_from(self.model), company_id, filters)
        result = await self.session.exec(query)
        return result.one()
