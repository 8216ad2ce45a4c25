# backend/rentdesk/db/repositories/tenant_repository.py
from datetime import date
from typing import Any, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from rentdesk.core.constants import TenantStatus
from rentdesk.db.models.tenant import Tenant
from rentdesk.db.repositories.base import OwnedRepository


class TenantRepository(OwnedRepository[Tenant]):
    """Repository for renter records; soft-deleted rows are hidden by default"""

    owner_column = "company_id"

    def __init__(self, session: AsyncSession):
        super().__init__(Tenant, session)

    def scoped(self, owner_id: str, include_deleted: bool = False) -> Select:
        query = select(Tenant).where(Tenant.company_id == owner_id)
        if not include_deleted:
            query = query.where(Tenant.status != TenantStatus.DELETED.value)
        return query

    async def get_owned(self, id: Any, owner_id: str, include_deleted: bool = False) -> Optional[Tenant]:
        result = await self.session.execute(
            self.scoped(owner_id, include_deleted).where(Tenant.id == id)
        )
        return result.scalar_one_or_none()

    async def list_owned(
        self,
        owner_id: str,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        property_id: Optional[str] = None,
        include_deleted: bool = False,
    ) -> List[Tenant]:
        query = self.scoped(owner_id, include_deleted)
        if status:
            query = query.where(Tenant.status == status)
        if property_id:
            query = query.where(Tenant.property_id == property_id)
        query = query.order_by(Tenant.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_live(
        self, owner_id: str, status: Optional[str] = None, property_id: Optional[str] = None
    ) -> int:
        """Count non-deleted tenants of an account"""
        query = (
            select(func.count(Tenant.id))
            .where(Tenant.company_id == owner_id)
            .where(Tenant.status != TenantStatus.DELETED.value)
        )
        if status:
            query = query.where(Tenant.status == status)
        if property_id:
            query = query.where(Tenant.property_id == property_id)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def find_by_email(self, owner_id: str, email: str, exclude_id: Optional[str] = None) -> Optional[Tenant]:
        """Duplicate-email lookup, scoped to one account"""
        query = self.scoped(owner_id).where(func.lower(Tenant.email) == email.lower())
        if exclude_id:
            query = query.where(Tenant.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def status_breakdown(self, owner_id: str) -> List[Tuple[str, int, float]]:
        """(status, count, rent sum) per status for non-deleted tenants"""
        stmt = (
            select(
                Tenant.status,
                func.count(Tenant.id).label("count"),
                func.coalesce(func.sum(Tenant.rent_amount), 0.0).label("total_rent"),
            )
            .where(Tenant.company_id == owner_id)
            .where(Tenant.status != TenantStatus.DELETED.value)
            .group_by(Tenant.status)
        )
        result = await self.session.execute(stmt)
        return [(status, int(count), float(total_rent or 0)) for status, count, total_rent in result.all()]

    async def recent(self, owner_id: str, limit: int = 5) -> List[Tenant]:
        result = await self.session.execute(
            self.scoped(owner_id)
            .order_by(Tenant.created_at.desc(), Tenant.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def active(self, owner_id: str) -> List[Tenant]:
        result = await self.session.execute(
            self.scoped(owner_id).where(Tenant.status == TenantStatus.ACTIVE.value)
        )
        return list(result.scalars().all())

    async def leases_ending_between(self, owner_id: str, start: date, end: date) -> List[Tenant]:
        result = await self.session.execute(
            self.scoped(owner_id)
            .where(Tenant.lease_end.is_not(None))
            .where(Tenant.lease_end >= start)
            .where(Tenant.lease_end <= end)
            .order_by(Tenant.lease_end.asc())
        )
        return list(result.scalars().all())
