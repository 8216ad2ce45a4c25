# backend/rentdesk/services/tenant_service.py
"""
Tenant (renter) lifecycle.

Checks run before any write: duplicate email within the account, the
linked property, then the quota slot. Deletion is a soft status flip that
returns the quota slot and unlinks the property.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.constants import Resource, TenantStatus
from rentdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from rentdesk.db.models.account import Account
from rentdesk.db.models.property import Property
from rentdesk.db.models.tenant import Tenant
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.db.repositories.property_repository import PropertyRepository
from rentdesk.db.repositories.tenant_repository import TenantRepository
from rentdesk.schemas.tenant import TenantCreate, TenantUpdate
from rentdesk.services.usage_limiter import QuotaGuard, resolve_limit, usage_report

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class TenantService:
    """Tenant operations for one session; every call is scoped to an account"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tenants = TenantRepository(session)
        self.properties = PropertyRepository(session)
        self.accounts = AccountRepository(session)
        self.quota = QuotaGuard(session)

    async def _ensure_unique_email(self, account_id: str, email: str, exclude_id: Optional[str] = None) -> None:
        if await self.tenants.find_by_email(account_id, email, exclude_id=exclude_id):
            raise ConflictError("Tenant with this email already exists")

    async def _owned_property(self, account_id: str, property_id: str) -> Property:
        prop = await self.properties.get_owned(property_id, account_id)
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    async def get(self, account_id: str, tenant_id: str) -> Tenant:
        tenant = await self.tenants.get_owned(tenant_id, account_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return tenant

    async def list(
        self,
        account_id: str,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        property_id: Optional[str] = None,
    ) -> Tuple[List[Tenant], int]:
        skip = (page - 1) * limit
        items = await self.tenants.list_owned(
            account_id, skip=skip, limit=limit, status=status, property_id=property_id
        )
        total = await self.tenants.count_live(account_id, status=status, property_id=property_id)
        return items, total

    async def create(self, account: Account, data: TenantCreate, user_id: Optional[str] = None) -> Tenant:
        await self._ensure_unique_email(account.id, data.email)

        prop = None
        if data.property_id:
            prop = await self._owned_property(account.id, data.property_id)

        await self.quota.reserve(account, Resource.TENANTS.value)

        values = data.model_dump(exclude_none=True)
        values["status"] = data.status.value
        values["company_id"] = account.id
        tenant = await self.tenants.create(values)
        tenant.record("created", user_id or account.id)

        if prop is not None:
            await self.properties.link_tenant(prop, tenant.id)
        await self.accounts.adjust_stat(account, "total_tenants", 1)

        await self.session.commit()
        await self.session.refresh(tenant)
        logger.info(
            f"Tenant created: {tenant.id}",
            extra={"account_id": account.id, "tenant_id": tenant.id},
        )
        return tenant

    async def update(self, account: Account, tenant_id: str, data: TenantUpdate, user_id: Optional[str] = None) -> Tenant:
        tenant = await self.get(account.id, tenant_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return tenant

        if "name" in changes and changes["name"] is None:
            raise ValidationError("Name cannot be empty")
        if "email" in changes:
            if changes["email"] is None:
                raise ValidationError("Email cannot be empty")
            await self._ensure_unique_email(account.id, changes["email"], exclude_id=tenant.id)

        lease_start = changes.get("lease_start", tenant.lease_start)
        lease_end = changes.get("lease_end", tenant.lease_end)
        if lease_start and lease_end and lease_end < lease_start:
            raise ValidationError("Lease end date must be after lease start date")

        new_prop = None
        old_prop = None
        moving = "property_id" in changes and changes["property_id"] != tenant.property_id
        if moving:
            if changes["property_id"]:
                new_prop = await self._owned_property(account.id, changes["property_id"])
            if tenant.property_id:
                old_prop = await self.properties.get_owned(tenant.property_id, account.id)

        for field in ("rent_amount", "rent_due_day", "security_deposit", "status"):
            if field in changes and changes[field] is None:
                del changes[field]

        diff: Dict[str, Any] = {}
        for field, value in changes.items():
            value = _jsonable(value) if field == "status" else value
            old = getattr(tenant, field)
            if old != value:
                diff[field] = {"from": _jsonable(old), "to": _jsonable(value)}
                setattr(tenant, field, value)

        if not diff:
            return tenant

        if old_prop is not None:
            await self.properties.unlink_tenant(old_prop, tenant.id)
        if new_prop is not None:
            await self.properties.link_tenant(new_prop, tenant.id)

        tenant.record("updated", user_id or account.id, diff)
        await self.session.commit()
        await self.session.refresh(tenant)
        logger.info(
            f"Tenant updated: {tenant.id}",
            extra={"account_id": account.id, "tenant_id": tenant.id, "fields": sorted(diff)},
        )
        return tenant

    async def delete(self, account: Account, tenant_id: str, user_id: Optional[str] = None) -> Tenant:
        """Soft delete: status flips to `deleted`, the row and its audit trail stay"""
        tenant = await self.get(account.id, tenant_id)

        previous = tenant.status
        tenant.mark_deleted()
        tenant.record(
            "deleted",
            user_id or account.id,
            {"status": {"from": previous, "to": TenantStatus.DELETED.value}},
        )

        if tenant.property_id:
            prop = await self.properties.get_owned(tenant.property_id, account.id)
            if prop is not None:
                await self.properties.unlink_tenant(prop, tenant.id)

        await self.quota.release(account.id, Resource.TENANTS.value)
        await self.accounts.adjust_stat(account, "total_tenants", -1)

        await self.session.commit()
        logger.info(
            f"Tenant deleted: {tenant.id}",
            extra={"account_id": account.id, "tenant_id": tenant.id},
        )
        return tenant

    async def usage(self, account: Account) -> Dict[str, int]:
        current = await self.tenants.count_live(account.id)
        return usage_report(current, resolve_limit(account.limits, Resource.TENANTS.value))
