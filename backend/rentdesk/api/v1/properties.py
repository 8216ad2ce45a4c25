# backend/rentdesk/api/v1/properties.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import AccountContext, get_account_context
from rentdesk.core.constants import PropertyStatus
from rentdesk.db.database import get_db
from rentdesk.db.models.property import Property
from rentdesk.schemas.common import Message, Page, Pagination, Usage
from rentdesk.schemas.property import Occupancy, PropertyCreate, PropertyResponse, PropertyUpdate
from rentdesk.services.property_service import PropertyService, occupancy

router = APIRouter()


def to_response(prop: Property) -> PropertyResponse:
    response = PropertyResponse.model_validate(prop)
    response.occupancy = Occupancy(**occupancy(prop))
    return response


@router.get("", response_model=Page[PropertyResponse])
async def list_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    property_type: Optional[str] = Query(None, alias="type"),
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    items, total = await PropertyService(db).list(
        ctx.account_id,
        page=page,
        limit=limit,
        status=status_filter.value if status_filter else None,
        property_type=property_type,
    )
    return {
        "items": [to_response(prop) for prop in items],
        "pagination": Pagination.build(page, limit, total),
    }


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """Create a property; monthly income is derived from rent or units"""
    return to_response(await PropertyService(db).create(ctx.account, body))


@router.get("/count", response_model=Usage)
async def count_properties(
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return await PropertyService(db).usage(ctx.account)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return to_response(await PropertyService(db).get(ctx.account_id, property_id))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    body: PropertyUpdate,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return to_response(await PropertyService(db).update(ctx.account, property_id, body))


@router.delete("/{property_id}", response_model=Message)
async def delete_property(
    property_id: str,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """Delete a property; refused with 409 while tenants are linked"""
    await PropertyService(db).delete(ctx.account, property_id)
    return {"message": "Property deleted successfully"}
