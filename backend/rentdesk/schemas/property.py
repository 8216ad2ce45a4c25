# backend/rentdesk/schemas/property.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rentdesk.core.constants import PropertyStatus, PropertyStructure, UnitStatus
from rentdesk.core.validators import MIN_NAME_LENGTH, sanitize_input


class Address(BaseModel):
    street: Optional[str] = None
    unit: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str = "US"


class Unit(BaseModel):
    unit_number: str
    status: UnitStatus = UnitStatus.AVAILABLE
    monthly_rent: float = Field(0.0, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)


class PropertyDetails(BaseModel):
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)
    units: List[Unit] = Field(default_factory=list)


class PropertyFinancial(BaseModel):
    purchase_price: Optional[float] = Field(None, ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    market_rent: float = Field(0.0, ge=0)
    property_tax: Optional[float] = Field(None, ge=0)
    insurance: Optional[float] = Field(None, ge=0)
    hoa_fees: Optional[float] = Field(None, ge=0)
    total_monthly_income: float = 0.0


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < MIN_NAME_LENGTH:
        raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
    return value


class PropertyCreate(BaseModel):
    name: str
    property_type: str = "apartment"
    property_structure: PropertyStructure = PropertyStructure.SINGLE_UNIT
    status: PropertyStatus = PropertyStatus.ACTIVE
    address: Address = Field(default_factory=Address)
    details: PropertyDetails = Field(default_factory=PropertyDetails)
    financial: PropertyFinancial = Field(default_factory=PropertyFinancial)
    images: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def strip_strings(cls, data):
        return sanitize_input(data)

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return _check_name(value)


class PropertyUpdate(BaseModel):
    """Partial update; nested blocks replace the stored block wholesale"""
    name: Optional[str] = None
    property_type: Optional[str] = None
    property_structure: Optional[PropertyStructure] = None
    status: Optional[PropertyStatus] = None
    address: Optional[Address] = None
    details: Optional[PropertyDetails] = None
    financial: Optional[PropertyFinancial] = None
    images: Optional[List[str]] = None

    @model_validator(mode="before")
    @classmethod
    def strip_strings(cls, data):
        return sanitize_input(data)

    @field_validator("name")
    @classmethod
    def valid_name(cls, value):
        return _check_name(value)


class Occupancy(BaseModel):
    total_units: int
    occupied_units: int
    rate: float


class PropertyResponse(BaseModel):
    id: str
    user_id: str
    name: str
    property_type: str
    property_structure: str
    status: str
    address: dict
    details: dict
    financial: dict
    tenants: List[str]
    images: List[str]
    occupancy: Optional[Occupancy] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
