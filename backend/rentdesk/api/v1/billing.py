# backend/rentdesk/api/v1/billing.py
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import AccountContext, get_account_context
from rentdesk.core.exceptions import ValidationError
from rentdesk.db.database import get_db
from rentdesk.schemas.billing import BillingEvent, BillingUsage
from rentdesk.services.billing_service import BillingService, verify_signature

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/usage", response_model=BillingUsage)
async def get_usage(
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """Plan, limits and live usage of the account"""
    return await BillingService(db).usage(ctx.account)


@router.post("/webhook")
async def billing_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """Subscription events from the billing provider"""
    body = await request.body()
    signature = request.headers.get("X-Signature", "")

    if not verify_signature(body, signature, request.app.state.settings.BILLING_WEBHOOK_SECRET):
        logger.warning("Invalid webhook signature")
        raise ValidationError("Invalid signature")

    try:
        event = BillingEvent.model_validate(json.loads(body))
    except (ValueError, SchemaValidationError):
        raise ValidationError("Invalid event payload")

    await BillingService(db).apply_event(event)
    return {"status": "success"}
