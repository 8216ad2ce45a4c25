# backend/rentdesk/db/models/tenant.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from sqlalchemy import Column, String, ForeignKey, Integer, Float, Date, DateTime, JSON, Text, Index
from sqlalchemy.orm import relationship

from rentdesk.core.constants import TenantStatus
from rentdesk.db.base import BaseModel, new_id, utcnow


@dataclass(frozen=True)
class LiveTenant:
    status: TenantStatus


@dataclass(frozen=True)
class DeletedTenant:
    deleted_at: datetime


TenantState = Union[LiveTenant, DeletedTenant]


class Tenant(BaseModel):
    """Renter occupying (or about to occupy) a property"""
    __tablename__ = "tenants"
    __table_args__ = (
        Index("ix_tenants_company_status", "company_id", "status"),
        Index("ix_tenants_company_email", "company_id", "email"),
    )

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    company_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)

    # Weak reference: the property may have been removed since
    property_id = Column(String(36), nullable=True, index=True)

    # Contact
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    emergency_contact = Column(String(255), nullable=True)
    emergency_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    # Lifecycle
    status = Column(String(20), default=TenantStatus.ACTIVE.value, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    # Lease and rent
    rent_amount = Column(Float, default=0.0, nullable=False)
    rent_due_day = Column(Integer, default=1, nullable=False)
    security_deposit = Column(Float, default=0.0, nullable=False)
    lease_start = Column(Date, nullable=True)
    lease_end = Column(Date, nullable=True)  # None = open-ended

    # Append-only list of {action, user_id, timestamp, changes}
    audit_trail = Column(JSON, default=list, nullable=False)

    # Relationships
    company = relationship("Account", back_populates="tenants")

    @property
    def state(self) -> TenantState:
        if self.status == TenantStatus.DELETED.value:
            return DeletedTenant(deleted_at=self.deleted_at)
        return LiveTenant(status=TenantStatus(self.status))

    @property
    def is_deleted(self) -> bool:
        return isinstance(self.state, DeletedTenant)

    def mark_deleted(self, when: Optional[datetime] = None) -> None:
        """Soft delete: the only transition that sets `deleted`"""
        self.status = TenantStatus.DELETED.value
        self.deleted_at = when or utcnow()

    def record(self, action: str, user_id: Optional[str], changes: Optional[Dict[str, Any]] = None) -> None:
        """Append an audit entry; earlier entries are never touched"""
        entry = {
            "action": action,
            "user_id": user_id,
            "timestamp": utcnow().isoformat(),
            "changes": changes or {},
        }
        self.audit_trail = list(self.audit_trail or []) + [entry]
