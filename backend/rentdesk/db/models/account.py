# backend/rentdesk/db/models/account.py
from sqlalchemy import Column, String, Boolean, JSON, DateTime
from sqlalchemy.orm import relationship

from rentdesk.db.base import BaseModel, new_id


class Account(BaseModel):
    """Paying customer (a property-management company)"""
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=True)

    # Profile
    name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Embedded documents
    subscription = Column(JSON, default=dict, nullable=False)  # plan, status, trial_ends, ...
    limits = Column(JSON, default=dict, nullable=False)  # tenants, properties, users, storage
    stats = Column(JSON, default=dict, nullable=False)  # denormalized dashboard cache
    settings = Column(JSON, default=dict, nullable=False)

    # Status
    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String(100), nullable=True)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    properties = relationship("Property", back_populates="owner", cascade="all, delete-orphan")
    tenants = relationship("Tenant", back_populates="company", cascade="all, delete-orphan")
    usage_counters = relationship("AccountUsage", back_populates="account", cascade="all, delete-orphan")

    @property
    def plan(self) -> str:
        return (self.subscription or {}).get("plan", "free")
