"""Affiliate program schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliateCommissionType,
    AffiliatePayoutMethod,
    AffiliatePayoutSchedule,
    AffiliatePayoutStatus,
    AffiliateStatus,
)
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class AffiliateSettingsUpdate(BaseSchema):
    """Update program settings."""

    commission_type: Optional[AffiliateCommissionType] = None
    commission_percentage: Optional[int] = Field(None, ge=0, le=10000)
    recurring_months: Optional[int] = Field(None, gt=0)
    minimum_payout_cents: Optional[int] = Field(None, ge=0)
    payout_schedule: Optional[AffiliatePayoutSchedule] = None
    attribution_window_days: Optional[int] = Field(None, gt=0)
    cookie_duration_days: Optional[int] = Field(None, gt=0)
    program_active: Optional[bool] = None
    require_approval: Optional[bool] = None
    allow_self_referral: Optional[bool] = None


class AffiliateSettingsResponse(BaseSchema, IDMixin, TimestampMixin):
    """Program settings."""

    commission_type: AffiliateCommissionType
    commission_percentage: int
    recurring_months: Optional[int] = None
    minimum_payout_cents: int
    payout_schedule: AffiliatePayoutSchedule
    attribution_window_days: int
    cookie_duration_days: int
    program_active: bool
    require_approval: bool
    allow_self_referral: bool


class AffiliateResponse(BaseSchema, IDMixin, TimestampMixin):
    """Affiliate partner."""

    user_id: UUID
    referral_code: str
    company_name: Optional[str] = None
    website_url: Optional[str] = None
    promotional_methods: Optional[str] = None
    status: AffiliateStatus
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    suspension_reason: Optional[str] = None
    payout_method: Optional[AffiliatePayoutMethod] = None
    payout_email: Optional[str] = None
    total_clicks: int
    total_signups: int
    total_paid_signups: int
    total_commission_earned_cents: int
    total_commission_paid_cents: int
    pending_commission_cents: int
    notes: Optional[str] = None


class AffiliateReason(BaseSchema):
    """Reason for rejection or suspension."""

    reason: str = Field(..., min_length=1)


class AffiliateNotes(BaseSchema):
    """Admin notes."""

    notes: Optional[str] = None


class PayoutResponse(BaseSchema, IDMixin, TimestampMixin):
    """Affiliate payout."""

    affiliate_id: UUID
    amount_cents: int
    commission_count: int
    period_start: date
    period_end: date
    status: AffiliatePayoutStatus
    payout_method: str
    transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None
    requested_at: datetime
    approved_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None


class PayoutComplete(BaseSchema):
    """Record the external transfer."""

    transaction_id: str = Field(..., min_length=1, max_length=255)


class PayoutFail(BaseSchema):
    """Record why a payout failed."""

    reason: str = Field(..., min_length=1)


class CommissionResponse(BaseSchema, IDMixin):
    """Affiliate commission."""

    affiliate_id: UUID
    referral_id: UUID
    billing_month: date
    subscription_amount_cents: int
    commission_percentage: int
    commission_amount_cents: int
    status: AffiliateCommissionStatus
    payout_id: Optional[UUID] = None
    created_at: datetime


class AffiliateReport(BaseSchema):
    """Program-wide totals."""

    total_affiliates: int
    active_affiliates: int
    pending_applications: int
    total_referrals: int
    total_conversions: int
    total_commission_earned_cents: int
    total_commission_paid_cents: int
    pending_payouts_cents: int
    pending_payouts_count: int


class MonthlyCommissionSummary(BaseSchema):
    """Commission totals for one billing month."""

    billing_month: date
    commission_count: int
    total_commission_cents: int
    paid_commission_cents: int


# === Affiliate side ===

class AffiliateApply(BaseSchema):
    """Apply to join the affiliate program."""

    company_name: Optional[str] = Field(None, max_length=255)
    website_url: Optional[str] = Field(None, max_length=500)
    promotional_methods: Optional[str] = None
    payout_method: Optional[AffiliatePayoutMethod] = None
    payout_email: Optional[EmailStr] = None


class AffiliateProfileUpdate(AffiliateApply):
    """Update the caller's affiliate profile."""


class ReferralResponse(BaseSchema, IDMixin):
    """A tracked referral click."""

    affiliate_id: UUID
    click_id: str
    clicked_at: datetime
    landing_page: Optional[str] = None
    signup_at: Optional[datetime] = None
    first_payment_at: Optional[datetime] = None
    converted: bool
    attribution_expires_at: datetime


class AffiliateStats(BaseSchema):
    """Lifetime and this-month figures for one affiliate."""

    total_clicks: int
    total_signups: int
    total_paid_signups: int
    conversion_rate: float
    total_commission_earned_cents: int
    total_commission_paid_cents: int
    pending_commission_cents: int
    this_month_clicks: int
    this_month_signups: int
    this_month_commission_cents: int


class CodeValidation(BaseSchema):
    """Whether a referral code can be used."""

    is_valid: bool
    affiliate_id: Optional[UUID] = None


class ClickTrack(BaseSchema):
    """Landing details of a referral visit."""

    landing_page: Optional[str] = Field(None, max_length=500)


class ClickTracked(BaseSchema):
    """Click id to carry through signup; null for unusable codes."""

    click_id: Optional[str] = None


class CommissionRecord(BaseSchema):
    """A subscription payment made by a referred business."""

    business_id: UUID
    payment_amount_cents: int = Field(..., gt=0)
    billing_month: Optional[date] = None
