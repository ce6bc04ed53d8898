"""Property and Unit schemas."""

from datetime import date
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import OccupancyStatus, PropertyType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class PropertyCreate(BaseSchema):
    """Create a new property."""

    name: str = Field(..., min_length=1, max_length=255)
    property_type: PropertyType = PropertyType.RESIDENTIAL

    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=50)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field("CA", max_length=50)

    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    square_feet: Optional[int] = Field(None, gt=0)
    lot_size: Optional[str] = Field(None, max_length=50)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)

    purchase_price_cents: Optional[int] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    current_value_cents: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    public_page_enabled: bool = False
    public_page_slug: Optional[str] = Field(None, max_length=255)
    accept_online_applications: bool = False


class PropertyUpdate(BaseSchema):
    """Update property."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    property_type: Optional[PropertyType] = None
    address_line1: Optional[str] = Field(None, min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=50)
    postal_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, max_length=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    square_feet: Optional[int] = Field(None, gt=0)
    lot_size: Optional[str] = Field(None, max_length=50)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    purchase_price_cents: Optional[int] = Field(None, ge=0)
    purchase_date: Optional[date] = None
    current_value_cents: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    public_page_enabled: Optional[bool] = None
    public_page_slug: Optional[str] = Field(None, max_length=255)
    accept_online_applications: Optional[bool] = None


class PropertyResponse(BaseSchema, IDMixin, TimestampMixin):
    """Property response."""

    business_id: UUID
    name: str
    property_type: PropertyType
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str
    year_built: Optional[int] = None
    square_feet: Optional[int] = None
    lot_size: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    purchase_price_cents: Optional[int] = None
    purchase_date: Optional[date] = None
    current_value_cents: Optional[int] = None
    notes: Optional[str] = None
    public_page_enabled: bool
    public_page_slug: Optional[str] = None
    accept_online_applications: bool
    is_active: bool


class PropertyStats(BaseSchema):
    """Occupancy and revenue figures for one property."""

    total_units: int
    occupied_units: int
    vacant_units: int
    active_tenants: int
    monthly_revenue_cents: int
    open_maintenance: int


class UnitCreate(BaseSchema):
    """Create a new unit."""

    unit_number: str = Field(..., min_length=1, max_length=50)
    unit_name: Optional[str] = Field(None, max_length=255)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    floor_number: Optional[int] = None
    monthly_rent_cents: int = Field(0, ge=0)
    security_deposit_cents: int = Field(0, ge=0)
    utilities_included: dict[str, Any] = Field(default_factory=dict)
    amenities: list[str] = Field(default_factory=list)
    occupancy_status: OccupancyStatus = OccupancyStatus.VACANT
    available_date: Optional[date] = None
    notes: Optional[str] = None


class UnitUpdate(BaseSchema):
    """Update unit."""

    unit_number: Optional[str] = Field(None, min_length=1, max_length=50)
    unit_name: Optional[str] = Field(None, max_length=255)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    floor_number: Optional[int] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    security_deposit_cents: Optional[int] = Field(None, ge=0)
    utilities_included: Optional[dict[str, Any]] = None
    amenities: Optional[list[str]] = None
    occupancy_status: Optional[OccupancyStatus] = None
    available_date: Optional[date] = None
    notes: Optional[str] = None


class UnitOccupancyUpdate(BaseSchema):
    """Set a unit's occupancy status."""

    occupancy_status: OccupancyStatus


class UnitResponse(BaseSchema, IDMixin, TimestampMixin):
    """Unit response."""

    property_id: UUID
    unit_number: str
    unit_name: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    floor_number: Optional[int] = None
    monthly_rent_cents: int
    security_deposit_cents: int
    utilities_included: dict[str, Any] = Field(default_factory=dict)
    amenities: list[str] = Field(default_factory=list)
    occupancy_status: OccupancyStatus
    available_date: Optional[date] = None
    notes: Optional[str] = None
    is_active: bool


class UnitStats(BaseSchema):
    """Summary figures for one unit."""

    tenant_count: int
    has_active_lease: bool
    monthly_rent_cents: int
    open_maintenance: int
