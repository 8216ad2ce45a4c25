# backend/rentdesk/core/constants.py
from enum import Enum
from typing import Dict


class PlanType(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INACTIVE = "inactive"


class TenantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PAST = "past"
    PENDING = "pending"
    EVICTED = "evicted"
    DELETED = "deleted"


class PropertyStructure(str, Enum):
    SINGLE_UNIT = "single_unit"
    MULTI_ROOM = "multi_room"
    MULTI_UNIT = "multi_unit"


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    VACANT = "vacant"
    UNDER_MAINTENANCE = "under_maintenance"


class UnitStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Resource(str, Enum):
    """Quota-limited resources"""
    TENANTS = "tenants"
    PROPERTIES = "properties"
    USERS = "users"
    STORAGE = "storage"


# Plan Limits Configuration (storage in MB)
PLAN_LIMITS: Dict[str, Dict[str, int]] = {
    PlanType.FREE: {
        Resource.TENANTS: 10,
        Resource.PROPERTIES: 5,
        Resource.USERS: 1,
        Resource.STORAGE: 100,
    },
    PlanType.BASIC: {
        Resource.TENANTS: 100,
        Resource.PROPERTIES: 25,
        Resource.USERS: 3,
        Resource.STORAGE: 1024,
    },
    PlanType.PROFESSIONAL: {
        Resource.TENANTS: 1000,
        Resource.PROPERTIES: 100,
        Resource.USERS: 10,
        Resource.STORAGE: 10240,
    },
    PlanType.ENTERPRISE: {
        Resource.TENANTS: 10000,
        Resource.PROPERTIES: 1000,
        Resource.USERS: 25,
        Resource.STORAGE: 51200,
    },
}

# Floor applied when an account's stored limit is missing or zero
DEFAULT_LIMITS: Dict[str, int] = {
    Resource.TENANTS: 10,
    Resource.PROPERTIES: 5,
    Resource.USERS: 1,
    Resource.STORAGE: 100,
}


def plan_limits(plan: str) -> Dict[str, int]:
    """Limits document for a plan, keyed by plain resource names"""
    table = PLAN_LIMITS.get(plan, PLAN_LIMITS[PlanType.FREE])
    return {resource.value: value for resource, value in table.items()}


DEFAULT_ACCOUNT_SETTINGS = {
    "currency": "USD",
    "timezone": "UTC",
    "date_format": "MM/DD/YYYY",
    "notifications": {
        "email": True,
        "sms": False,
        "payment_reminders": True,
        "maintenance_alerts": True,
    },
}

EMPTY_STATS = {
    "total_tenants": 0,
    "total_properties": 0,
    "total_revenue": 0.0,
    "active_leases": 0,
}
