"""Lease schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from app.models.enums import LeaseStatus, LeaseType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class LeaseCreate(BaseSchema):
    """Create a draft lease."""

    unit_id: UUID
    tenant_id: Optional[UUID] = None
    lease_type: LeaseType = LeaseType.FIXED_TERM
    start_date: date
    end_date: Optional[date] = None
    monthly_rent_cents: int = Field(..., gt=0)
    security_deposit_cents: int = Field(0, ge=0)
    rent_due_day: int = Field(1, ge=1, le=28)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_dates(self):
        """End date must be after start date."""
        if self.end_date and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class LeaseUpdate(BaseSchema):
    """Update lease terms."""

    tenant_id: Optional[UUID] = None
    lease_type: Optional[LeaseType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    monthly_rent_cents: Optional[int] = Field(None, gt=0)
    security_deposit_cents: Optional[int] = Field(None, ge=0)
    rent_due_day: Optional[int] = Field(None, ge=1, le=28)
    notes: Optional[str] = None


class LeaseResponse(BaseSchema, IDMixin, TimestampMixin):
    """Lease response."""

    unit_id: UUID
    tenant_id: Optional[UUID] = None
    lease_type: LeaseType
    status: LeaseStatus
    start_date: date
    end_date: Optional[date] = None
    monthly_rent_cents: int
    security_deposit_cents: int
    rent_due_day: int
    notes: Optional[str] = None
    activated_at: Optional[datetime] = None
    terminated_at: Optional[datetime] = None
