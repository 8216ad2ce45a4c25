# backend/rentdesk/services/billing_service.py
"""
Billing events.

The webhook is the only writer of `subscription.plan` and `limits`; every
event body is authenticated with an HMAC-SHA256 of the raw bytes.
"""
import hashlib
import hmac
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.constants import PlanType, Resource, SubscriptionStatus, plan_limits
from rentdesk.core.exceptions import NotFoundError, ValidationError
from rentdesk.db.models.account import Account
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.schemas.billing import BillingEvent
from rentdesk.services.usage_limiter import QuotaGuard, resolve_limit, usage_report

logger = logging.getLogger(__name__)

SUBSCRIPTION_EVENTS = ("subscription.created", "subscription.updated", "subscription.deleted")


def sign_payload(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign_payload(payload, secret), signature)


class BillingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.accounts = AccountRepository(session)

    async def apply_event(self, event: BillingEvent) -> Account:
        if event.type not in SUBSCRIPTION_EVENTS:
            raise ValidationError(f"Unsupported event type: {event.type}")

        payload = event.data
        account = await self.accounts.get(payload.account_id)
        if account is None:
            raise NotFoundError("Account not found")

        if event.type == "subscription.deleted":
            plan = PlanType.FREE.value
            subscription = {
                "plan": plan,
                "status": SubscriptionStatus.CANCELED.value,
                "billing_subscription_id": None,
                "cancel_at_period_end": False,
            }
        else:
            plan = payload.plan.value
            subscription = {
                "plan": plan,
                "status": payload.status.value,
                "current_period_end": payload.current_period_end.isoformat() if payload.current_period_end else None,
                "cancel_at_period_end": payload.cancel_at_period_end,
            }
            if payload.customer_id:
                subscription["billing_customer_id"] = payload.customer_id
            if payload.subscription_id:
                subscription["billing_subscription_id"] = payload.subscription_id

        await self.accounts.set_subscription(account, subscription, plan_limits(plan))
        await self.session.commit()
        logger.info(
            f"Subscription {event.type}: plan={plan}",
            extra={"account_id": account.id},
        )
        return account

    async def usage(self, account: Account) -> dict:
        quota = QuotaGuard(self.session)
        usage = {}
        for resource in (Resource.TENANTS.value, Resource.PROPERTIES.value):
            current = await quota.live_count(account.id, resource)
            usage[resource] = usage_report(current, resolve_limit(account.limits, resource))
        subscription = account.subscription or {}
        return {
            "plan": account.plan,
            "status": subscription.get("status", SubscriptionStatus.INACTIVE.value),
            "limits": account.limits or {},
            "usage": usage,
            "subscription": subscription,
        }
