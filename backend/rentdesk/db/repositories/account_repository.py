# backend/rentdesk/db/repositories/account_repository.py
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.constants import EMPTY_STATS
from rentdesk.db.base import utcnow
from rentdesk.db.models.account import Account
from rentdesk.db.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account operations"""

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def get_by_email(self, email: str) -> Optional[Account]:
        result = await self.session.execute(
            select(Account).where(Account.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def set_stats(self, account: Account, values: Dict[str, Any]) -> Account:
        """Overwrite part of the stats cache"""
        stats = {**EMPTY_STATS, **(account.stats or {}), **values}
        account.stats = stats
        account.updated_at = utcnow()
        await self.session.flush()
        return account

    async def adjust_stat(self, account: Account, key: str, delta: int) -> Account:
        """Increment a cached counter, never below zero"""
        current = (account.stats or {}).get(key, 0) or 0
        return await self.set_stats(account, {key: max(0, current + delta)})

    async def set_subscription(self, account: Account, subscription: Dict[str, Any], limits: Dict[str, int]) -> Account:
        account.subscription = {**(account.subscription or {}), **subscription}
        account.limits = dict(limits)
        account.updated_at = utcnow()
        await self.session.flush()
        return account
