"""Tenant (renter) schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import TenantStatus, TenantType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class TenantCreate(BaseSchema):
    """Create a tenant in a unit."""

    unit_id: UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)

    emergency_contact_name: Optional[str] = Field(None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(None, max_length=50)
    emergency_contact_relationship: Optional[str] = Field(None, max_length=100)

    employer: Optional[str] = Field(None, max_length=255)
    employer_phone: Optional[str] = Field(None, max_length=50)
    monthly_income_cents: Optional[int] = Field(None, ge=0)

    tenant_type: TenantType = TenantType.PRIMARY
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    security_deposit_paid_cents: int = Field(0, ge=0)
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None

    has_portal_access: bool = True
    status: TenantStatus = TenantStatus.ACTIVE
    notes: Optional[str] = None


class TenantUpdate(BaseSchema):
    """Update tenant."""

    unit_id: Optional[UUID] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    emergency_contact_name: Optional[str] = Field(None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(None, max_length=50)
    emergency_contact_relationship: Optional[str] = Field(None, max_length=100)
    employer: Optional[str] = Field(None, max_length=255)
    employer_phone: Optional[str] = Field(None, max_length=50)
    monthly_income_cents: Optional[int] = Field(None, ge=0)
    tenant_type: Optional[TenantType] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    security_deposit_paid_cents: Optional[int] = Field(None, ge=0)
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    has_portal_access: Optional[bool] = None
    status: Optional[TenantStatus] = None
    notes: Optional[str] = None


class TenantResponse(BaseSchema, IDMixin, TimestampMixin):
    """Tenant response."""

    unit_id: UUID
    user_id: Optional[UUID] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relationship: Optional[str] = None
    employer: Optional[str] = None
    employer_phone: Optional[str] = None
    monthly_income_cents: Optional[int] = None
    tenant_type: TenantType
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent_cents: Optional[int] = None
    security_deposit_paid_cents: int
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    has_portal_access: bool
    portal_invite_sent_at: Optional[datetime] = None
    portal_last_login_at: Optional[datetime] = None
    status: TenantStatus
    notes: Optional[str] = None
    is_active: bool


class TenantStats(BaseSchema):
    """Payment and maintenance figures for one tenant."""

    total_payments: int
    paid_payments: int
    pending_payments: int
    total_paid_cents: int
    maintenance_requests: int
    lease_end_date: Optional[date] = None
