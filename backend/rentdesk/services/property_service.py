# backend/rentdesk/services/property_service.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.constants import PropertyStructure, Resource, UnitStatus
from rentdesk.core.exceptions import ConflictError, NotFoundError
from rentdesk.db.models.account import Account
from rentdesk.db.models.property import Property
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.db.repositories.property_repository import PropertyRepository
from rentdesk.schemas.property import PropertyCreate, PropertyUpdate
from rentdesk.services.usage_limiter import QuotaGuard, resolve_limit, usage_report

logger = logging.getLogger(__name__)


def compute_monthly_income(structure: str, details: Dict[str, Any], financial: Dict[str, Any]) -> float:
    """Market rent for a single unit, otherwise the sum of the units' rents"""
    if structure == PropertyStructure.SINGLE_UNIT.value:
        return float(financial.get("market_rent") or 0)
    return float(sum(float(unit.get("monthly_rent") or 0) for unit in details.get("units") or []))


def occupancy(prop: Property) -> Dict[str, Any]:
    """Occupied and total units; a single unit is occupied when tenants are linked"""
    if prop.property_structure == PropertyStructure.SINGLE_UNIT.value:
        total = 1
        occupied = 1 if prop.has_tenants else 0
    else:
        units = prop.units
        total = len(units)
        occupied = sum(1 for unit in units if unit.get("status") == UnitStatus.OCCUPIED.value)
    rate = round(occupied / total * 100, 1) if total else 0.0
    return {"total_units": total, "occupied_units": occupied, "rate": rate}


class PropertyService:
    """Property operations; every call is scoped to the owning account"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.properties = PropertyRepository(session)
        self.accounts = AccountRepository(session)
        self.quota = QuotaGuard(session)

    async def get(self, account_id: str, property_id: str) -> Property:
        prop = await self.properties.get_owned(property_id, account_id)
        if prop is None:
            raise NotFoundError("Property not found")
        return prop

    async def list(
        self,
        account_id: str,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> Tuple[List[Property], int]:
        items = await self.properties.list_filtered(
            account_id, skip=(page - 1) * limit, limit=limit, status=status, property_type=property_type
        )
        filters = {}
        if status:
            filters["status"] = status
        if property_type:
            filters["property_type"] = property_type
        total = await self.properties.count_owned(account_id, filters=filters)
        return items, total

    async def create(self, account: Account, data: PropertyCreate) -> Property:
        await self.quota.reserve(account, Resource.PROPERTIES.value)

        values = data.model_dump(mode="json")
        values["financial"]["total_monthly_income"] = compute_monthly_income(
            values["property_structure"], values["details"], values["financial"]
        )
        values["user_id"] = account.id
        values["tenants"] = []
        prop = await self.properties.create(values)
        await self.accounts.adjust_stat(account, "total_properties", 1)

        await self.session.commit()
        logger.info(
            f"Property created: {prop.id}",
            extra={"account_id": account.id, "property_id": prop.id},
        )
        return prop

    async def update(self, account: Account, property_id: str, data: PropertyUpdate) -> Property:
        prop = await self.get(account.id, property_id)
        changes = {
            field: value
            for field, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }

        structure = changes.get("property_structure", prop.property_structure)
        details = changes.get("details", prop.details or {})
        financial = dict(changes.get("financial", prop.financial or {}))
        financial["total_monthly_income"] = compute_monthly_income(structure, details, financial)
        changes["financial"] = financial

        prop = await self.properties.update(prop, changes)
        await self.session.commit()
        logger.info(
            f"Property updated: {prop.id}",
            extra={"account_id": account.id, "property_id": prop.id},
        )
        return prop

    async def delete(self, account: Account, property_id: str) -> None:
        """Hard delete, refused while tenants are linked"""
        prop = await self.get(account.id, property_id)
        if prop.has_tenants:
            raise ConflictError(
                "Cannot delete property with active tenants",
                property_id=prop.id,
                tenants=len(prop.tenants),
            )

        await self.properties.delete(prop)
        await self.quota.release(account.id, Resource.PROPERTIES.value)
        await self.accounts.adjust_stat(account, "total_properties", -1)

        await self.session.commit()
        logger.info(
            f"Property deleted: {property_id}",
            extra={"account_id": account.id, "property_id": property_id},
        )

    async def usage(self, account: Account) -> Dict[str, int]:
        current = await self.properties.count_owned(account.id)
        return usage_report(current, resolve_limit(account.limits, Resource.PROPERTIES.value))
