# backend/rentdesk/db/repositories/usage_repository.py
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.db.base import utcnow
from rentdesk.db.models.usage import AccountUsage


class UsageRepository:
    """Quota counters; increments are conditional single-statement updates"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, account_id: str, resource: str) -> Optional[AccountUsage]:
        result = await self.session.execute(
            select(AccountUsage).where(
                AccountUsage.account_id == account_id,
                AccountUsage.resource == resource,
            )
        )
        return result.scalar_one_or_none()

    async def used(self, account_id: str, resource: str) -> Optional[int]:
        result = await self.session.execute(
            select(AccountUsage.used).where(
                AccountUsage.account_id == account_id,
                AccountUsage.resource == resource,
            )
        )
        return result.scalar_one_or_none()

    async def seed(self, account_id: str, resource: str, used: int = 0) -> AccountUsage:
        counter = AccountUsage(account_id=account_id, resource=resource, used=used)
        self.session.add(counter)
        await self.session.flush()
        return counter

    async def try_reserve(self, account_id: str, resource: str, limit: int) -> bool:
        """Take one slot if the counter is below `limit`; True when taken"""
        result = await self.session.execute(
            update(AccountUsage)
            .where(
                AccountUsage.account_id == account_id,
                AccountUsage.resource == resource,
                AccountUsage.used < limit,
            )
            .values(used=AccountUsage.used + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def release(self, account_id: str, resource: str) -> None:
        await self.session.execute(
            update(AccountUsage)
            .where(
                AccountUsage.account_id == account_id,
                AccountUsage.resource == resource,
                AccountUsage.used > 0,
            )
            .values(used=AccountUsage.used - 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
