# backend/rentdesk/db/repositories/base.py
from typing import Any, Generic, TypeVar, Type, Optional, List, Dict

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations"""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """Get by ID"""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """Create new record (flushed, not committed)"""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """Apply field changes to a loaded record"""
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        await self.session.delete(db_obj)
        await self.session.flush()


class OwnedRepository(BaseRepository[ModelType]):
    """
    Repository whose every finder is scoped to the owning account.

    Subclasses name the owner column. `get()` is disabled so that every
    lookup carries an owner id.
    """

    owner_column: str = "user_id"

    def _owner(self):
        return getattr(self.model, self.owner_column)

    def scoped(self, owner_id: str) -> Select:
        return select(self.model).where(self._owner() == owner_id)

    async def get(self, id: Any) -> Optional[ModelType]:
        raise NotImplementedError("use get_owned() with an owner id")

    async def get_owned(self, id: Any, owner_id: str) -> Optional[ModelType]:
        result = await self.session.execute(
            self.scoped(owner_id).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def list_owned(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[ModelType]:
        query = self.scoped(owner_id)
        for key, value in (filters or {}).items():
            query = query.where(getattr(self.model, key) == value)
        query = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_owned(self, owner_id: str, filters: Optional[Dict[str, Any]] = None) -> int:
        query = select(func.count()).select_from(self.model).where(self._owner() == owner_id)
        for key, value in (filters or {}).items():
            query = query.where(getattr(self.model, key) == value)
        result = await self.session.execute(query)
        return result.scalar() or 0
