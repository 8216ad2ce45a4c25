# backend/rentdesk/api/v1/tenants.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import AccountContext, get_account_context
from rentdesk.core.constants import TenantStatus
from rentdesk.db.database import get_db
from rentdesk.schemas.common import Message, Page, Pagination, Usage
from rentdesk.schemas.tenant import TenantCreate, TenantResponse, TenantUpdate
from rentdesk.services.tenant_service import TenantService

router = APIRouter()


@router.get("", response_model=Page[TenantResponse])
async def list_tenants(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    property_id: Optional[str] = None,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """List the account's tenants, newest first (deleted tenants are hidden)"""
    items, total = await TenantService(db).list(
        ctx.account_id,
        page=page,
        limit=limit,
        status=status_filter.value if status_filter else None,
        property_id=property_id,
    )
    return {"items": items, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return await TenantService(db).create(ctx.account, body)


@router.get("/count", response_model=Usage)
async def count_tenants(
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return await TenantService(db).usage(ctx.account)


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: str,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return await TenantService(db).get(ctx.account_id, tenant_id)


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str,
    body: TenantUpdate,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; fields absent from the body are left unchanged"""
    return await TenantService(db).update(ctx.account, tenant_id, body)


@router.delete("/{tenant_id}", response_model=Message)
async def delete_tenant(
    tenant_id: str,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    await TenantService(db).delete(ctx.account, tenant_id)
    return {"message": "Tenant deleted successfully"}
