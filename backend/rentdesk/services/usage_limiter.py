# backend/rentdesk/services/usage_limiter.py
"""
Plan quota enforcement.

`can_create` is the pure decision; `QuotaGuard` applies it against the
per-account usage counters, taking a slot with a conditional increment so
that concurrent creations cannot overshoot the limit.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.constants import DEFAULT_LIMITS, Resource
from rentdesk.core.exceptions import QuotaExceededError
from rentdesk.db.models.account import Account
from rentdesk.db.repositories.property_repository import PropertyRepository
from rentdesk.db.repositories.tenant_repository import TenantRepository
from rentdesk.db.repositories.usage_repository import UsageRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LimitDecision:
    allowed: bool
    limit: int
    current: int
    reason: Optional[str] = None


def resolve_limit(limits: Optional[Dict[str, Any]], resource: str) -> int:
    """Stored limit for a resource, or the default when missing or not positive"""
    resource = Resource(resource).value
    value = (limits or {}).get(resource)
    try:
        value = int(value)
    except (TypeError, ValueError):
        value = 0
    if value <= 0:
        return DEFAULT_LIMITS[resource]
    return value


def can_create(plan: str, current_count: int, limit: int, resource: str) -> LimitDecision:
    """Decide whether one more `resource` fits under `limit` (every plan is checked)"""
    if current_count < limit:
        return LimitDecision(allowed=True, limit=limit, current=current_count)

    plan_name = str(plan or "free").replace("_", " ").title()
    return LimitDecision(
        allowed=False,
        limit=limit,
        current=current_count,
        reason=f"{plan_name} plan limited to {limit} {Resource(resource).value}. Please upgrade.",
    )


def usage_report(current: int, limit: int) -> Dict[str, int]:
    percentage = round(current / limit * 100) if limit else 0
    return {"current": current, "max": limit, "percentage": percentage}


class QuotaGuard:
    """Applies plan limits to creations for one account"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.usage_repo = UsageRepository(session)

    async def live_count(self, account_id: str, resource: str) -> int:
        if resource == Resource.TENANTS.value:
            return await TenantRepository(self.session).count_live(account_id)
        if resource == Resource.PROPERTIES.value:
            return await PropertyRepository(self.session).count_owned(account_id)
        raise ValueError(f"No counter for resource {resource!r}")

    async def current_usage(self, account_id: str, resource: str) -> int:
        """Counter value, seeding the counter from the live count if absent"""
        used = await self.usage_repo.used(account_id, resource)
        if used is not None:
            return used

        used = await self.live_count(account_id, resource)
        try:
            async with self.session.begin_nested():
                await self.usage_repo.seed(account_id, resource, used)
        except IntegrityError:
            # another request seeded the counter first
            logger.debug("Usage counter already seeded", extra={"account_id": account_id, "resource": resource})
            used = await self.usage_repo.used(account_id, resource)
        return used

    async def reserve(self, account: Account, resource: str) -> LimitDecision:
        """Take one slot or raise QuotaExceededError"""
        resource = Resource(resource).value
        limit = resolve_limit(account.limits, resource)
        await self.current_usage(account.id, resource)

        if await self.usage_repo.try_reserve(account.id, resource, limit):
            current = await self.usage_repo.used(account.id, resource)
            return LimitDecision(allowed=True, limit=limit, current=current)

        current = await self.usage_repo.used(account.id, resource)
        decision = can_create(account.plan, max(current, limit), limit, resource)
        logger.info(
            "Quota denied",
            extra={"account_id": account.id, "resource": resource, "limit": limit, "current": current},
        )
        raise QuotaExceededError(decision.reason, limit=limit, current=current, resource=resource)

    async def release(self, account_id: str, resource: str) -> None:
        await self.usage_repo.release(account_id, Resource(resource).value)
