# backend/rentdesk/db/models/property.py
from sqlalchemy import Column, String, ForeignKey, JSON
from sqlalchemy.orm import relationship

from rentdesk.db.base import BaseModel, new_id


class Property(BaseModel):
    """Rental property owned by exactly one account"""
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    user_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    property_type = Column(String(50), default="apartment", nullable=False)
    property_structure = Column(String(20), default="single_unit", nullable=False)  # single_unit, multi_room, multi_unit
    status = Column(String(30), default="active", nullable=False, index=True)  # active, vacant, under_maintenance

    address = Column(JSON, default=dict, nullable=False)
    details = Column(JSON, default=dict, nullable=False)  # includes units[]
    financial = Column(JSON, default=dict, nullable=False)

    # Ids of linked tenants; deletion is refused while non-empty
    tenants = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)

    # Relationships
    owner = relationship("Account", back_populates="properties")

    @property
    def units(self) -> list:
        return list((self.details or {}).get("units") or [])

    @property
    def has_tenants(self) -> bool:
        return bool(self.tenants)
