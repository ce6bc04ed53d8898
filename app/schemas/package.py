"""Package tier, feature, add-on and entitlement schemas."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import (
    AddonPurchaseStatus,
    AddonType,
    BillingCycle,
    FeatureCategory,
    FeatureType,
)
from app.schemas.base import BaseSchema, IDMixin, LimitStatus, TimestampMixin


# === Tiers ===

class PackageTierCreate(BaseSchema):
    """Create a package tier."""

    tier_name: str = Field(..., min_length=1, max_length=100)
    tier_slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")
    display_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    monthly_price_cents: int = Field(0, ge=0)
    annual_price_cents: int = Field(0, ge=0)
    package_type: str = "standard"
    max_businesses: int = Field(1, ge=0)
    max_properties: int = Field(5, ge=0)
    max_units: int = Field(10, ge=0)
    max_tenants: int = Field(10, ge=0)
    max_users: int = Field(1, ge=0)
    max_payment_methods: int = Field(1, ge=0)
    features: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    is_featured: bool = False
    display_order: int = 0


class PackageTierUpdate(BaseSchema):
    """Update a package tier."""

    tier_name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    monthly_price_cents: Optional[int] = Field(None, ge=0)
    annual_price_cents: Optional[int] = Field(None, ge=0)
    package_type: Optional[str] = None
    max_businesses: Optional[int] = Field(None, ge=0)
    max_properties: Optional[int] = Field(None, ge=0)
    max_units: Optional[int] = Field(None, ge=0)
    max_tenants: Optional[int] = Field(None, ge=0)
    max_users: Optional[int] = Field(None, ge=0)
    max_payment_methods: Optional[int] = Field(None, ge=0)
    features: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    display_order: Optional[int] = None


class PackageTierResponse(BaseSchema, IDMixin, TimestampMixin):
    """Package tier response."""

    tier_name: str
    tier_slug: str
    display_name: str
    description: Optional[str] = None
    monthly_price_cents: int
    annual_price_cents: int
    package_type: str
    max_businesses: int
    max_properties: int
    max_units: int
    max_tenants: int
    max_users: int
    max_payment_methods: int
    features: dict[str, Any] = Field(default_factory=dict)
    is_active: bool
    is_featured: bool
    display_order: int
    version: int


class BusinessPackageSettingsUpdate(BaseSchema):
    """Tier assignment and per-business overrides."""

    package_tier_id: Optional[UUID] = None
    custom_max_businesses: Optional[int] = Field(None, ge=0)
    custom_max_properties: Optional[int] = Field(None, ge=0)
    custom_max_units: Optional[int] = Field(None, ge=0)
    custom_max_tenants: Optional[int] = Field(None, ge=0)
    custom_max_users: Optional[int] = Field(None, ge=0)
    custom_max_payment_methods: Optional[int] = Field(None, ge=0)
    custom_features: Optional[dict[str, Any]] = None
    custom_monthly_price_cents: Optional[int] = Field(None, ge=0)
    custom_annual_price_cents: Optional[int] = Field(None, ge=0)
    has_custom_pricing: Optional[bool] = None
    has_custom_limits: Optional[bool] = None
    billing_cycle: Optional[BillingCycle] = None
    notes: Optional[str] = None


class TierAssign(BaseSchema):
    """Assign a tier to a business."""

    package_tier_id: UUID


class EffectivePackageSettings(BaseSchema):
    """Limits and features after applying overrides to the tier."""

    tier_id: Optional[UUID] = None
    tier_name: Optional[str] = None
    max_businesses: int
    max_properties: int
    max_units: int
    max_tenants: int
    max_users: int
    max_payment_methods: int
    features: dict[str, Any] = Field(default_factory=dict)
    monthly_price_cents: int = 0
    annual_price_cents: int = 0
    billing_cycle: BillingCycle = BillingCycle.MONTHLY


class PackageLimitCheck(BaseSchema):
    """Whether current usage fits the effective package."""

    within_limits: bool
    violations: list[str] = Field(default_factory=list)


class UsageSummary(BaseSchema):
    """Limit status of every limited resource."""

    business: LimitStatus
    property: LimitStatus
    unit: LimitStatus
    tenant: LimitStatus
    team_member: LimitStatus


# === Features ===

class FeatureCreate(BaseSchema):
    """Create a catalog feature."""

    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    feature_type: FeatureType = FeatureType.FEATURE
    category: FeatureCategory = FeatureCategory.CORE
    is_active: bool = True
    display_order: int = 0


class FeatureUpdate(BaseSchema):
    """Update a catalog feature."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    feature_type: Optional[FeatureType] = None
    category: Optional[FeatureCategory] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class FeatureResponse(BaseSchema, IDMixin, TimestampMixin):
    """Feature response."""

    slug: str
    name: str
    description: Optional[str] = None
    feature_type: FeatureType
    category: FeatureCategory
    category_display_name: Optional[str] = None
    is_active: bool
    display_order: int


class TierFeaturesSet(BaseSchema):
    """Replace the set of features included in a tier."""

    feature_ids: list[UUID] = Field(default_factory=list)


class TierAddonUpsert(BaseSchema):
    """Offer a feature to a tier as a paid add-on."""

    feature_id: UUID
    price_cents: int = Field(..., ge=0)
    billing_period: BillingCycle = BillingCycle.MONTHLY


class TierAddonResponse(BaseSchema, IDMixin):
    """Tier add-on response."""

    tier_id: UUID
    feature_id: UUID
    price_cents: int
    billing_period: BillingCycle
    formatted_price: Optional[str] = None


class FeatureTierConfig(BaseSchema):
    """A feature and where it is included or sold."""

    feature: FeatureResponse
    included_in_tier_ids: list[UUID] = Field(default_factory=list)
    addon_offers: list[TierAddonResponse] = Field(default_factory=list)


class FeatureAccess(BaseSchema):
    """Whether the current business may use a feature."""

    slug: str
    has_access: bool


# === Add-ons ===

class AddonProductCreate(BaseSchema):
    """Create an add-on product."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    addon_type: AddonType
    quantity_per_unit: int = Field(1, gt=0)
    price_cents: int = Field(..., ge=0)
    billing_period: BillingCycle = BillingCycle.MONTHLY
    feature_id: Optional[UUID] = None
    is_active: bool = True


class AddonProductUpdate(BaseSchema):
    """Update an add-on product."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    quantity_per_unit: Optional[int] = Field(None, gt=0)
    price_cents: Optional[int] = Field(None, ge=0)
    billing_period: Optional[BillingCycle] = None
    feature_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class AddonProductResponse(BaseSchema, IDMixin, TimestampMixin):
    """Add-on product response."""

    name: str
    description: Optional[str] = None
    addon_type: AddonType
    quantity_per_unit: int
    price_cents: int
    billing_period: BillingCycle
    feature_id: Optional[UUID] = None
    is_active: bool
    formatted_price: Optional[str] = None


class AddonPurchaseCreate(BaseSchema):
    """Buy an add-on."""

    addon_product_id: UUID
    quantity: int = Field(1, gt=0)


class AddonQuantityUpdate(BaseSchema):
    """Change a purchase's quantity."""

    quantity: int


class AddonPurchaseResponse(BaseSchema, IDMixin, TimestampMixin):
    """Add-on purchase response."""

    business_id: UUID
    addon_product_id: UUID
    quantity: int
    status: AddonPurchaseStatus
    purchased_at: datetime
    next_billing_date: Optional[date] = None
    cancelled_at: Optional[datetime] = None
