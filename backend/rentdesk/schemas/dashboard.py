# backend/rentdesk/schemas/dashboard.py
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class UpcomingRent(BaseModel):
    tenant_id: str
    tenant_name: str
    property_id: Optional[str] = None
    amount: float
    due_date: date


class RecentTenant(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    status: str
    created_at: datetime


class UpcomingTask(BaseModel):
    id: str
    type: str = "lease"
    title: str = "Lease Renewal"
    description: str
    due_date: date
    days_remaining: int
    priority: str
    tenant_id: str
    property_id: Optional[str] = None


class DashboardStats(BaseModel):
    total_tenants: int = 0
    active_tenants: int = 0
    total_monthly_revenue: float = 0.0
    tenants_by_status: Dict[str, int] = Field(default_factory=dict)
    upcoming_rents: List[UpcomingRent] = Field(default_factory=list)
    recent_tenants: List[RecentTenant] = Field(default_factory=list)
    upcoming_tasks: List[UpcomingTask] = Field(default_factory=list)
    total_properties: int = 0
    total_units: int = 0
    vacant_units: int = 0
    vacancy_rate: float = 0.0
    occupancy_rate: float = 0.0
    generated_at: date
    degraded: bool = False

    @classmethod
    def empty(cls, generated_at: date) -> "DashboardStats":
        """Zeroed stats served when the store cannot be read"""
        return cls(generated_at=generated_at, degraded=True)


class CachedStats(BaseModel):
    total_tenants: int = 0
    total_properties: int = 0
    total_revenue: float = 0.0
    active_leases: int = 0
