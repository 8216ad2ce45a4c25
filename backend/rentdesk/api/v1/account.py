# backend/rentdesk/api/v1/account.py
"""
Self-service account changes for the signed-in owner
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import get_current_account
from rentdesk.db.database import get_db
from rentdesk.db.models.account import Account
from rentdesk.schemas.account import AccountResponse, PasswordChange, ProfileUpdate
from rentdesk.schemas.common import Message
from rentdesk.services.account_service import AccountService

router = APIRouter()


@router.put("/profile", response_model=AccountResponse)
async def update_profile(
    body: ProfileUpdate,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    """Update name, company, avatar and settings; other fields in the body are ignored"""
    return await AccountService(db).update_profile(account, body)


@router.put("/password", response_model=Message)
async def change_password(
    body: PasswordChange,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
):
    await AccountService(db).change_password(account, body)
    return {"message": "Password updated successfully"}
