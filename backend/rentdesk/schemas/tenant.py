# backend/rentdesk/schemas/tenant.py
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rentdesk.core.constants import TenantStatus
from rentdesk.core.validators import MIN_NAME_LENGTH, is_valid_email, is_valid_phone, normalize_email, sanitize_input


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < MIN_NAME_LENGTH:
        raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
    return value


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = normalize_email(value)
    if not is_valid_email(value):
        raise ValueError("Invalid email format")
    return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not is_valid_phone(value):
        raise ValueError("Invalid phone format")
    return value


class TenantFields(BaseModel):
    phone: Optional[str] = None
    address: Optional[str] = None
    property_id: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    notes: Optional[str] = None
    rent_amount: Optional[float] = Field(None, ge=0)
    rent_due_day: Optional[int] = Field(None, ge=1, le=31)
    security_deposit: Optional[float] = Field(None, ge=0)
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None

    @model_validator(mode="before")
    @classmethod
    def strip_strings(cls, data):
        return sanitize_input(data)

    @field_validator("phone", "emergency_phone")
    @classmethod
    def valid_phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @model_validator(mode="after")
    def lease_dates_ordered(self):
        if self.lease_start and self.lease_end and self.lease_end < self.lease_start:
            raise ValueError("Lease end date must be after lease start date")
        return self


class TenantCreate(TenantFields):
    name: str
    email: str
    status: TenantStatus = TenantStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return _check_email(value)

    @field_validator("status")
    @classmethod
    def not_deleted(cls, value: TenantStatus) -> TenantStatus:
        if value == TenantStatus.DELETED:
            raise ValueError("Use DELETE to remove a tenant")
        return value


class TenantUpdate(TenantFields):
    """Partial update: only the fields present in the body are applied"""
    name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[TenantStatus] = None

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def valid_email(cls, value):
        return _check_email(value)

    @field_validator("status")
    @classmethod
    def not_deleted(cls, value: Optional[TenantStatus]) -> Optional[TenantStatus]:
        if value == TenantStatus.DELETED:
            raise ValueError("Use DELETE to remove a tenant")
        return value


class AuditEntry(BaseModel):
    action: str
    user_id: Optional[str] = None
    timestamp: str
    changes: Dict[str, Any] = Field(default_factory=dict)


class TenantResponse(BaseModel):
    id: str
    company_id: str
    property_id: Optional[str] = None
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    notes: Optional[str] = None
    status: str
    deleted_at: Optional[datetime] = None
    rent_amount: float
    rent_due_day: int
    security_deposit: float
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    audit_trail: List[AuditEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
