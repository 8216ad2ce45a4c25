# backend/rentdesk/db/models/usage.py
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship

from rentdesk.db.base import BaseModel


class AccountUsage(BaseModel):
    """Per-account counter of quota-limited resources"""
    __tablename__ = "account_usage"

    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    resource = Column(String(30), primary_key=True)  # tenants, properties
    used = Column(Integer, default=0, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="usage_counters")
