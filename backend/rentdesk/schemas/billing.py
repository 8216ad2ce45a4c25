# backend/rentdesk/schemas/billing.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from rentdesk.core.constants import PlanType, SubscriptionStatus
from rentdesk.schemas.common import Usage


class SubscriptionPayload(BaseModel):
    account_id: str
    plan: PlanType = PlanType.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None


class BillingEvent(BaseModel):
    type: str
    data: SubscriptionPayload


class BillingUsage(BaseModel):
    plan: str
    status: str
    limits: Dict[str, int]
    usage: Dict[str, Usage] = Field(default_factory=dict)
    subscription: Dict[str, Any] = Field(default_factory=dict)
