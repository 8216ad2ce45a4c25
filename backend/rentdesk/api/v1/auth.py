# backend/rentdesk/api/v1/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import get_current_account
from rentdesk.db.database import get_db
from rentdesk.db.models.account import Account
from rentdesk.schemas.account import AccountResponse, AuthResponse, LoginRequest, RegisterRequest
from rentdesk.services.account_service import AccountService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Register a new account (free plan, trialing)"""
    service = AccountService(db, request.app.state.settings)
    account, token = await service.register(body)
    return AuthResponse(access_token=token, account=AccountResponse.model_validate(account))


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    account, token = await AccountService(db).authenticate(body)
    return AuthResponse(access_token=token, account=AccountResponse.model_validate(account))


@router.get("/me", response_model=AccountResponse)
async def me(account: Account = Depends(get_current_account)):
    return account
