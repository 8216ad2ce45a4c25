# backend/rentdesk/services/account_service.py
import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import Settings, settings as default_settings
from rentdesk.core.constants import (
    DEFAULT_ACCOUNT_SETTINGS,
    EMPTY_STATS,
    PlanType,
    Resource,
    SubscriptionStatus,
    plan_limits,
)
from rentdesk.core.exceptions import ConflictError, UnauthenticatedError
from rentdesk.core.security import create_access_token, get_password_hash, verify_password
from rentdesk.core.validators import normalize_email
from rentdesk.db.base import utcnow
from rentdesk.db.models.account import Account
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.db.repositories.usage_repository import UsageRepository
from rentdesk.schemas.account import LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest

logger = logging.getLogger(__name__)


def issue_token(account: Account) -> str:
    return create_access_token({"sub": account.id, "email": account.email})


class AccountService:
    """Registration, credential checks and self-service account changes"""

    def __init__(self, session: AsyncSession, config: Optional[Settings] = None):
        self.session = session
        self.config = config or default_settings
        self.accounts = AccountRepository(session)
        self.usage = UsageRepository(session)

    async def register(self, data: RegisterRequest) -> Tuple[Account, str]:
        """
        Create an account on the free plan, trialing for TRIAL_DAYS.

        Usage counters are seeded at zero so that the first creation does
        not have to count rows.
        """
        email = normalize_email(data.email)
        if await self.accounts.get_by_email(email):
            raise ConflictError("Email already registered")

        now = utcnow()
        account = await self.accounts.create({
            "email": email,
            "hashed_password": get_password_hash(data.password),
            "name": data.name,
            "company_name": data.company_name,
            "subscription": {
                "plan": PlanType.FREE.value,
                "status": SubscriptionStatus.TRIALING.value,
                "trial_ends": (now + timedelta(days=self.config.TRIAL_DAYS)).isoformat(),
                "current_period_end": None,
                "billing_customer_id": None,
                "billing_subscription_id": None,
                "cancel_at_period_end": False,
            },
            "limits": plan_limits(PlanType.FREE.value),
            "stats": dict(EMPTY_STATS),
            "settings": dict(DEFAULT_ACCOUNT_SETTINGS),
            "email_verified": False,
            "verification_token": secrets.token_urlsafe(32),
        })
        for resource in (Resource.TENANTS, Resource.PROPERTIES):
            await self.usage.seed(account.id, resource.value, 0)

        await self.session.commit()
        logger.info(f"Account registered: {account.id}", extra={"account_id": account.id})
        return account, issue_token(account)

    async def authenticate(self, data: LoginRequest) -> Tuple[Account, str]:
        account = await self.accounts.get_by_email(normalize_email(data.email))
        if account is None or not verify_password(data.password, account.hashed_password):
            logger.warning("Failed login attempt")
            raise UnauthenticatedError("Invalid email or password")
        if not account.is_active:
            raise UnauthenticatedError("Account is disabled")

        account.last_login = utcnow()
        await self.session.commit()
        return account, issue_token(account)

    async def update_profile(self, account: Account, data: ProfileUpdate) -> Account:
        changes = data.model_dump(exclude_unset=True)
        # name and settings cannot be cleared
        for field in ("name", "settings"):
            if changes.get(field) is None:
                changes.pop(field, None)
        if "settings" in changes:
            changes["settings"] = {**(account.settings or {}), **changes["settings"]}

        account = await self.accounts.update(account, changes)
        await self.session.commit()
        await self.session.refresh(account)
        logger.info(
            "Account profile updated",
            extra={"account_id": account.id, "fields": sorted(changes)},
        )
        return account

    async def change_password(self, account: Account, data: PasswordChange) -> None:
        if not verify_password(data.current_password, account.hashed_password):
            logger.warning("Password change with wrong current password", extra={"account_id": account.id})
            raise UnauthenticatedError("Current password is incorrect")

        account.hashed_password = get_password_hash(data.new_password)
        await self.session.commit()
        logger.info("Account password changed", extra={"account_id": account.id})
