"""Rent payment and Square gateway schemas."""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import PaymentMethod, PaymentStatus, PaymentType
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class PaymentCreate(BaseSchema):
    """Record a rent payment."""

    tenant_id: UUID
    lease_id: Optional[UUID] = None
    amount_cents: int = Field(..., gt=0)
    currency_code: str = Field("CAD", min_length=3, max_length=3)
    payment_type: PaymentType = PaymentType.RENT
    payment_method: Optional[PaymentMethod] = None
    status: PaymentStatus = PaymentStatus.PENDING
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None


class PaymentMarkPaid(BaseSchema):
    """Mark a payment as paid."""

    paid_date: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None


class PaymentResponse(BaseSchema, IDMixin, TimestampMixin):
    """Rent payment response."""

    tenant_id: UUID
    lease_id: Optional[UUID] = None
    amount_cents: int
    currency_code: str
    payment_type: PaymentType
    payment_method: Optional[PaymentMethod] = None
    status: PaymentStatus
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    gateway_payment_id: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class SquarePaymentRequest(BaseSchema):
    """Card charge forwarded to Square."""

    amount_cents: int = Field(..., gt=0)
    currency: str = Field("CAD", min_length=3, max_length=3)
    source_id: str = Field(..., min_length=1)
    idempotency_key: str = Field(..., min_length=1, max_length=45)
    verification_token: Optional[str] = None
    tenant_id: Optional[UUID] = None
    payment_type: PaymentType = PaymentType.RENT
    description: Optional[str] = Field(None, max_length=500)
