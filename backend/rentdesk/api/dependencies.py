# backend/rentdesk/api/dependencies.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.exceptions import UnauthenticatedError
from rentdesk.core.security import decode_token
from rentdesk.db.database import get_db
from rentdesk.db.models.account import Account
from rentdesk.db.repositories.account_repository import AccountRepository

security = HTTPBearer(auto_error=False)


@dataclass
class AccountContext:
    """The caller as seen by the services; plan and limits are read off `account`"""
    account_id: str
    account: Account


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Account:
    """Account named by the bearer token's `sub`"""
    if not credentials:
        raise UnauthenticatedError("Authentication required")

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access" or not payload.get("sub"):
        raise UnauthenticatedError("Could not validate credentials")

    account = await AccountRepository(db).get(payload["sub"])
    if account is None or not account.is_active:
        raise UnauthenticatedError("Account not found or inactive")
    return account


async def get_account_context(account: Account = Depends(get_current_account)) -> AccountContext:
    return AccountContext(account_id=account.id, account=account)
