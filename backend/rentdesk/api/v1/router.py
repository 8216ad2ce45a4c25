# backend/rentdesk/api/v1/router.py
from fastapi import APIRouter

from rentdesk.api.v1 import account, auth, billing, dashboard, properties, tenants

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(account.router, prefix="/account", tags=["account"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
