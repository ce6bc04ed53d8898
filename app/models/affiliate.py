"""Affiliate program models: settings, partners, referrals, commissions, payouts."""

import uuid
from datetime import datetime, date
from typing import Any, Optional

from sqlalchemy import (
    String, DateTime, Date, ForeignKey, Text, Integer, BigInteger, Boolean, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONType, enum_column
from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliateCommissionType,
    AffiliatePayoutMethod,
    AffiliatePayoutSchedule,
    AffiliatePayoutStatus,
    AffiliateStatus,
)


class AffiliateSettings(Base):
    """Program-wide affiliate configuration (single row)."""

    __tablename__ = "affiliate_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    commission_type: Mapped[AffiliateCommissionType] = mapped_column(
        enum_column(AffiliateCommissionType),
        default=AffiliateCommissionType.RECURRING,
        nullable=False,
    )
    # Basis points: 2000 = 20%
    commission_percentage: Mapped[int] = mapped_column(Integer, default=2000, nullable=False)
    # NULL = lifetime
    recurring_months: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    minimum_payout_cents: Mapped[int] = mapped_column(BigInteger, default=5000, nullable=False)
    payout_schedule: Mapped[AffiliatePayoutSchedule] = mapped_column(
        enum_column(AffiliatePayoutSchedule),
        default=AffiliatePayoutSchedule.MONTHLY,
        nullable=False,
    )
    attribution_window_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    cookie_duration_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    program_active: Mapped[bool] = mapped_column(Boolean, default=True)
    require_approval: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_self_referral: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Affiliate(Base):
    """A referral partner."""

    __tablename__ = "affiliates"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    referral_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    promotional_methods: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[AffiliateStatus] = mapped_column(
        enum_column(AffiliateStatus),
        default=AffiliateStatus.PENDING,
        nullable=False,
        index=True,
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    suspension_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    payout_method: Mapped[Optional[AffiliatePayoutMethod]] = mapped_column(
        enum_column(AffiliatePayoutMethod),
        nullable=True,
    )
    payout_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bank_details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    # Denormalized stats
    total_clicks: Mapped[int] = mapped_column(Integer, default=0)
    total_signups: Mapped[int] = mapped_column(Integer, default=0)
    total_paid_signups: Mapped[int] = mapped_column(Integer, default=0)
    total_commission_earned_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    total_commission_paid_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    pending_commission_cents: Mapped[int] = mapped_column(BigInteger, default=0)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class AffiliateReferral(Base):
    """A tracked click and its conversion."""

    __tablename__ = "affiliate_referrals"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    affiliate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("affiliates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referred_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    referred_business_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="SET NULL"),
        nullable=True,
    )
    click_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    clicked_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    landing_page: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    signup_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    first_payment_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    first_payment_amount_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    converted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    attribution_expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class AffiliatePayout(Base):
    """A batch payment of earned commissions to an affiliate."""

    __tablename__ = "affiliate_payouts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    affiliate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("affiliates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    commission_count: Mapped[int] = mapped_column(Integer, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[AffiliatePayoutStatus] = mapped_column(
        enum_column(AffiliatePayoutStatus),
        default=AffiliatePayoutStatus.PENDING,
        nullable=False,
        index=True,
    )
    payout_method: Mapped[str] = mapped_column(String(50), nullable=False)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    requested_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class AffiliateCommission(Base):
    """Commission earned on one billing month of a referred subscription."""

    __tablename__ = "affiliate_commissions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    affiliate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("affiliates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referral_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("affiliate_referrals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    billing_month: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    subscription_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # Basis points at time of earning
    commission_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    commission_amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)

    status: Mapped[AffiliateCommissionStatus] = mapped_column(
        enum_column(AffiliateCommissionStatus),
        default=AffiliateCommissionStatus.EARNED,
        nullable=False,
        index=True,
    )
    payout_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("affiliate_payouts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
