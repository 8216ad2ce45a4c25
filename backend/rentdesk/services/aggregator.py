# backend/rentdesk/services/aggregator.py
"""
Dashboard statistics.

Computes per-account summary figures from the tenant and property tables
and keeps the account's `stats` block in step with them. The date helpers
are pure and take `today` explicitly.
"""
import asyncio
import calendar
import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import Settings, settings as default_settings
from rentdesk.core.constants import EMPTY_STATS, PropertyStructure, TaskPriority, TenantStatus, UnitStatus
from rentdesk.core.exceptions import NotFoundError
from rentdesk.db.models.property import Property
from rentdesk.db.models.tenant import Tenant
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.db.repositories.property_repository import PropertyRepository
from rentdesk.db.repositories.tenant_repository import TenantRepository
from rentdesk.schemas.dashboard import DashboardStats, RecentTenant, UpcomingRent, UpcomingTask

logger = logging.getLogger(__name__)

# Failures that degrade the dashboard instead of failing the request
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def clamp_day(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(max(day, 1), last))


def rent_due_date(rent_due_day: int, today: date) -> date:
    """
    This month's rent due date.

    The due day is clamped to the last day of the month, so a due day of 31
    falls on the 30th in April and on the 28th or 29th in February. A day
    that has already passed stays in the past and drops out of the window.
    """
    return clamp_day(today.year, today.month, rent_due_day)


def upcoming_rents(tenants: Iterable[Tenant], today: date, window_days: int = 7, limit: int = 5) -> List[UpcomingRent]:
    """Active tenants whose rent falls due within `window_days` of today"""
    horizon = today + timedelta(days=window_days)
    rows = []
    for tenant in tenants:
        if tenant.status != TenantStatus.ACTIVE.value:
            continue
        due = rent_due_date(tenant.rent_due_day or 1, today)
        if today <= due <= horizon:
            rows.append(
                UpcomingRent(
                    tenant_id=tenant.id,
                    tenant_name=tenant.name,
                    property_id=tenant.property_id,
                    amount=float(tenant.rent_amount or 0),
                    due_date=due,
                )
            )
    rows.sort(key=lambda row: (row.due_date, row.tenant_name))
    return rows[:limit]


def renewal_priority(days_remaining: int) -> TaskPriority:
    if days_remaining <= 7:
        return TaskPriority.HIGH
    if days_remaining <= 14:
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


def lease_renewal_tasks(tenants: Iterable[Tenant], today: date, window_days: int = 30) -> List[UpcomingTask]:
    """Renewal reminders for leases ending in the next `window_days` days (today excluded)"""
    tasks = []
    for tenant in tenants:
        if tenant.lease_end is None or tenant.is_deleted:
            continue
        days = (tenant.lease_end - today).days
        if not 0 < days <= window_days:
            continue
        tasks.append(
            UpcomingTask(
                id=f"lease-{tenant.id}",
                description=f"Lease for {tenant.name} expires in {days} days",
                due_date=tenant.lease_end,
                days_remaining=days,
                priority=renewal_priority(days).value,
                tenant_id=tenant.id,
                property_id=tenant.property_id,
            )
        )
    tasks.sort(key=lambda task: (task.due_date, task.id))
    return tasks


def unit_counts(properties: Iterable[Property]) -> Tuple[int, int]:
    """(total units, vacant units); a single-unit property is one unit, occupied when tenants are linked"""
    total = vacant = 0
    for prop in properties:
        if prop.property_structure == PropertyStructure.SINGLE_UNIT.value:
            total += 1
            if not prop.has_tenants:
                vacant += 1
            continue
        for unit in prop.units:
            total += 1
            if unit.get("status") != UnitStatus.OCCUPIED.value:
                vacant += 1
    return total, vacant


def vacancy_rates(total_units: int, vacant_units: int) -> Tuple[float, float]:
    """(vacancy %, occupancy %) rounded to one decimal; zero when there are no units"""
    if not total_units:
        return 0.0, 0.0
    vacancy = round(vacant_units / total_units * 100, 1)
    occupancy = round((total_units - vacant_units) / total_units * 100, 1)
    return vacancy, occupancy


class DashboardAggregator:
    """Computes and caches per-account dashboard statistics"""

    def __init__(self, session: AsyncSession, config: Optional[Settings] = None):
        self.session = session
        self.config = config or default_settings
        self.tenant_repo = TenantRepository(session)
        self.property_repo = PropertyRepository(session)
        self.account_repo = AccountRepository(session)

    async def compute_stats(self, account_id: str, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        try:
            return await self._compute(account_id, today)
        except STORE_ERRORS as exc:
            logger.error(
                f"Dashboard stats unavailable: {exc}",
                extra={"account_id": account_id},
                exc_info=True,
            )
            return DashboardStats.empty(today)

    async def _compute(self, account_id: str, today: date) -> DashboardStats:
        limit = self.config.DASHBOARD_LIST_LIMIT

        by_status: Dict[str, int] = {}
        revenue = 0.0
        for status, count, total_rent in await self.tenant_repo.status_breakdown(account_id):
            by_status[status] = count
            if status == TenantStatus.ACTIVE.value:
                revenue += total_rent

        active = await self.tenant_repo.active(account_id)
        recent = await self.tenant_repo.recent(account_id, limit=limit)
        ending = await self.tenant_repo.leases_ending_between(
            account_id, today, today + timedelta(days=self.config.LEASE_RENEWAL_WINDOW_DAYS)
        )
        properties = await self.property_repo.all_for_owner(account_id)

        total_units, vacant_units = unit_counts(properties)
        vacancy, occupancy = vacancy_rates(total_units, vacant_units)

        return DashboardStats(
            total_tenants=sum(by_status.values()),
            active_tenants=by_status.get(TenantStatus.ACTIVE.value, 0),
            total_monthly_revenue=round(revenue, 2),
            tenants_by_status=by_status,
            upcoming_rents=upcoming_rents(
                active, today, window_days=self.config.UPCOMING_RENT_WINDOW_DAYS, limit=limit
            ),
            recent_tenants=[
                RecentTenant(
                    id=t.id,
                    name=t.name,
                    email=t.email,
                    phone=t.phone,
                    status=t.status,
                    created_at=t.created_at,
                )
                for t in recent
            ],
            upcoming_tasks=lease_renewal_tasks(
                ending, today, window_days=self.config.LEASE_RENEWAL_WINDOW_DAYS
            ),
            total_properties=len(properties),
            total_units=total_units,
            vacant_units=vacant_units,
            vacancy_rate=vacancy,
            occupancy_rate=occupancy,
            generated_at=today,
        )

    @staticmethod
    def cache_values(stats: DashboardStats) -> Dict[str, Any]:
        """The subset of the dashboard that is cached on the account"""
        return {
            "total_tenants": stats.total_tenants,
            "total_properties": stats.total_properties,
            "total_revenue": stats.total_monthly_revenue,
            "active_leases": stats.active_tenants,
        }

    async def write_back(self, account_id: str, stats: DashboardStats) -> bool:
        """
        Store the cached figures on the account when they changed.

        Degraded (zeroed) stats are never written. Returns True when the
        account was updated.
        """
        if stats.degraded:
            return False
        account = await self.account_repo.get(account_id)
        if account is None:
            raise NotFoundError("Account not found")

        values = self.cache_values(stats)
        current = {**EMPTY_STATS, **(account.stats or {})}
        if all(current.get(key) == value for key, value in values.items()):
            return False

        await self.account_repo.set_stats(account, values)
        await self.session.commit()
        logger.info("Dashboard stats cache updated", extra={"account_id": account_id})
        return True

    async def refresh_stats(self, account_id: str, today: Optional[date] = None) -> DashboardStats:
        stats = await self.compute_stats(account_id, today)
        await self.write_back(account_id, stats)
        return stats

    async def read_stats(self, account_id: str) -> Dict[str, Any]:
        """Cached `stats` block, without recomputation"""
        account = await self.account_repo.get(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return {**EMPTY_STATS, **(account.stats or {})}


async def write_back_in_background(database, account_id: str, stats: DashboardStats) -> None:
    """Post-response cache update; runs in its own session and never raises"""
    try:
        async with database.session() as session:
            await DashboardAggregator(session, database.config).write_back(account_id, stats)
    except Exception as exc:
        logger.error(
            f"Dashboard stats write-back failed: {exc}",
            extra={"account_id": account_id},
            exc_info=True,
        )
