# backend/rentdesk/db/repositories/property_repository.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.db.models.property import Property
from rentdesk.db.repositories.base import OwnedRepository


class PropertyRepository(OwnedRepository[Property]):
    """Repository for Property operations"""

    owner_column = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(Property, session)

    async def list_filtered(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> List[Property]:
        filters = {}
        if status:
            filters["status"] = status
        if property_type:
            filters["property_type"] = property_type
        return await self.list_owned(owner_id, skip=skip, limit=limit, filters=filters)

    async def all_for_owner(self, owner_id: str) -> List[Property]:
        result = await self.session.execute(
            select(Property).where(Property.user_id == owner_id)
        )
        return list(result.scalars().all())

    async def link_tenant(self, prop: Property, tenant_id: str) -> None:
        linked = list(prop.tenants or [])
        if tenant_id not in linked:
            prop.tenants = linked + [tenant_id]
            await self.session.flush()

    async def unlink_tenant(self, prop: Property, tenant_id: str) -> None:
        linked = list(prop.tenants or [])
        if tenant_id in linked:
            prop.tenants = [t for t in linked if t != tenant_id]
            await self.session.flush()
