"""Listing and rental application schemas."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import ApplicationStatus, ListingStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class ListingFromUnit(BaseSchema):
    """Overrides applied when a listing is built from a unit."""

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    available_date: Optional[date] = None
    lease_term_months: Optional[int] = Field(None, gt=0)
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    deposit_cents: Optional[int] = Field(None, ge=0)
    application_fee_cents: Optional[int] = Field(None, ge=0)
    furnished: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    pet_policy: Optional[str] = None
    parking_spaces: Optional[int] = Field(None, ge=0)
    photos: Optional[list[str]] = None


class ListingUpdate(BaseSchema):
    """Update listing."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    available_date: Optional[date] = None
    lease_term_months: Optional[int] = Field(None, gt=0)
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    deposit_cents: Optional[int] = Field(None, ge=0)
    application_fee_cents: Optional[int] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    furnished: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    pet_policy: Optional[str] = None
    parking_spaces: Optional[int] = Field(None, ge=0)
    amenities: Optional[list[str]] = None
    utilities_included: Optional[list[str]] = None
    photos: Optional[list[str]] = None
    accept_applications: Optional[bool] = None
    expires_at: Optional[datetime] = None


class ListingResponse(BaseSchema, IDMixin, TimestampMixin):
    """Listing response."""

    business_id: UUID
    property_id: UUID
    unit_id: Optional[UUID] = None
    title: str
    description: Optional[str] = None
    status: ListingStatus
    slug: str
    listing_code: str
    available_date: Optional[date] = None
    lease_term_months: Optional[int] = None
    monthly_rent_cents: int
    deposit_cents: Optional[int] = None
    application_fee_cents: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    furnished: bool
    pets_allowed: bool
    pet_policy: Optional[str] = None
    parking_spaces: int
    amenities: list[str] = Field(default_factory=list)
    utilities_included: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    accept_applications: bool
    view_count: int
    application_count: int
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class PublicListingResponse(BaseSchema):
    """What an applicant sees at /apply/{code}."""

    listing_code: str
    title: str
    description: Optional[str] = None
    available_date: Optional[date] = None
    lease_term_months: Optional[int] = None
    monthly_rent_cents: int
    deposit_cents: Optional[int] = None
    application_fee_cents: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[int] = None
    furnished: bool
    pets_allowed: bool
    pet_policy: Optional[str] = None
    parking_spaces: int
    amenities: list[str] = Field(default_factory=list)
    utilities_included: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    accept_applications: bool


class ListingStats(BaseSchema):
    """Engagement figures for a listing."""

    view_count: int
    application_count: int
    days_listed: int


class ApplicationSubmit(BaseSchema):
    """Public application form."""

    applicant_first_name: str = Field(..., min_length=1, max_length=100)
    applicant_last_name: str = Field(..., min_length=1, max_length=100)
    applicant_email: EmailStr
    applicant_phone: Optional[str] = Field(None, max_length=50)
    responses: dict[str, Any] = Field(default_factory=dict)


class ApplicationReject(BaseSchema):
    """Reject with a reason."""

    reason: Optional[str] = None


class ApplicationReview(BaseSchema):
    """Landlord's assessment while reviewing."""

    landlord_rating: Optional[int] = Field(None, ge=1, le=5)
    landlord_notes: Optional[str] = None


class ApplicationConvert(BaseSchema):
    """Lease details used when turning an applicant into a tenant."""

    unit_id: Optional[UUID] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    security_deposit_paid_cents: int = Field(0, ge=0)
    move_in_date: Optional[date] = None


class ApplicationResponse(BaseSchema, IDMixin, TimestampMixin):
    """Rental application response."""

    listing_id: UUID
    business_id: UUID
    property_id: UUID
    unit_id: Optional[UUID] = None
    applicant_first_name: str
    applicant_last_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    responses: dict[str, Any] = Field(default_factory=dict)
    status: ApplicationStatus
    landlord_rating: Optional[int] = None
    landlord_notes: Optional[str] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    converted_to_tenant_id: Optional[UUID] = None
    converted_at: Optional[datetime] = None
