"""Package tiers, feature catalog and add-on models (entitlements)."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    String, DateTime, Date, ForeignKey, Text, Integer, BigInteger, Boolean, Uuid,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, JSONType, enum_column
from app.models.enums import (
    AddonPurchaseStatus,
    AddonType,
    BillingCycle,
    FeatureCategory,
    FeatureType,
)

if TYPE_CHECKING:
    from app.models.business import Business

# Limit value meaning "no limit"
UNLIMITED = 999999


class PackageTier(Base):
    """A subscription plan bounding resource limits and feature access."""

    __tablename__ = "package_tiers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    tier_name: Mapped[str] = mapped_column(String(100), nullable=False)
    tier_slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Money (INTEGER CENTS)
    monthly_price_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    annual_price_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    package_type: Mapped[str] = mapped_column(String(50), default="standard")

    # Limits (UNLIMITED = no limit)
    max_businesses: Mapped[int] = mapped_column(Integer, default=1)
    max_properties: Mapped[int] = mapped_column(Integer, default=5)
    max_units: Mapped[int] = mapped_column(Integer, default=10)
    max_tenants: Mapped[int] = mapped_column(Integer, default=10)
    max_users: Mapped[int] = mapped_column(Integer, default=1)
    max_payment_methods: Mapped[int] = mapped_column(Integer, default=1)

    # {"online_payments": true, "ai_screening": false, ...}
    features: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class BusinessPackageSettings(Base):
    """A business's tier assignment plus per-business overrides."""

    __tablename__ = "business_package_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    package_tier_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("package_tiers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Overrides (NULL = use tier value)
    custom_max_businesses: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_max_properties: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_max_units: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_max_tenants: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_max_users: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_max_payment_methods: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_features: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    custom_monthly_price_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    custom_annual_price_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    has_custom_pricing: Mapped[bool] = mapped_column(Boolean, default=False)
    has_custom_limits: Mapped[bool] = mapped_column(Boolean, default=False)
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        enum_column(BillingCycle),
        default=BillingCycle.MONTHLY,
        nullable=False,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    business: Mapped["Business"] = relationship("Business", back_populates="package_settings")


class Feature(Base):
    """Catalog entry for a gated feature or a sellable add-on feature."""

    __tablename__ = "features"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    feature_type: Mapped[FeatureType] = mapped_column(
        enum_column(FeatureType),
        default=FeatureType.FEATURE,
        nullable=False,
    )
    category: Mapped[FeatureCategory] = mapped_column(
        enum_column(FeatureCategory),
        default=FeatureCategory.CORE,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class TierFeature(Base):
    """A feature included in a tier."""

    __tablename__ = "tier_features"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    tier_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("package_tiers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    feature_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("features.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("tier_id", "feature_id", name="uq_tier_feature"),
    )


class TierAddon(Base):
    """A feature a tier may buy as an add-on, with its price."""

    __tablename__ = "tier_addons"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    tier_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("package_tiers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    feature_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("features.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    price_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    billing_period: Mapped[BillingCycle] = mapped_column(
        enum_column(BillingCycle),
        default=BillingCycle.MONTHLY,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("tier_id", "feature_id", name="uq_tier_addon"),
    )


class AddonProduct(Base):
    """A purchasable capacity add-on (extra properties, units, seats...)."""

    __tablename__ = "addon_products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    addon_type: Mapped[AddonType] = mapped_column(
        enum_column(AddonType),
        nullable=False,
        index=True,
    )
    # Capacity granted per purchased quantity
    quantity_per_unit: Mapped[int] = mapped_column(Integer, default=1)
    price_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    billing_period: Mapped[BillingCycle] = mapped_column(
        enum_column(BillingCycle),
        default=BillingCycle.MONTHLY,
        nullable=False,
    )
    # Feature unlocked by the purchase (feature-type add-ons)
    feature_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("features.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class AddonPurchase(Base):
    """A business's purchase of an add-on product."""

    __tablename__ = "addon_purchases"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    addon_product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("addon_products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[AddonPurchaseStatus] = mapped_column(
        enum_column(AddonPurchaseStatus),
        default=AddonPurchaseStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    purchased_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    next_billing_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_addon_purchase_quantity_positive"),
    )
