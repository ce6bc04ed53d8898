"""Package tiers and business package settings."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, LimitedResource, NotFoundError
from app.models.enums import AuditAction, BillingCycle
from app.models.package import UNLIMITED, BusinessPackageSettings, PackageTier
from app.services.audit import AuditService
from app.services.entitlements import EntitlementService

logger = logging.getLogger(__name__)

LIMIT_NAMES = (
    "max_businesses",
    "max_properties",
    "max_units",
    "max_tenants",
    "max_users",
    "max_payment_methods",
)

# Limits of a business that has no package settings at all
UNCONFIGURED_LIMITS = {name: 0 for name in LIMIT_NAMES} | {
    "max_businesses": 1,
    "max_users": 1,
}

VIOLATION_LABELS = (
    ("Businesses", "max_businesses", LimitedResource.BUSINESS),
    ("Properties", "max_properties", LimitedResource.PROPERTY),
    ("Units", "max_units", LimitedResource.UNIT),
    ("Tenants", "max_tenants", LimitedResource.TENANT),
    ("Users", "max_users", LimitedResource.TEAM_MEMBER),
)


def merge_effective_settings(
    settings: Optional[BusinessPackageSettings],
    tier: Optional[PackageTier],
) -> dict[str, Any]:
    """Apply per-business overrides on top of the tier."""
    if settings is None:
        return {
            "tier_id": None,
            "tier_name": None,
            **UNCONFIGURED_LIMITS,
            "features": {},
            "monthly_price_cents": 0,
            "annual_price_cents": 0,
            "billing_cycle": BillingCycle.MONTHLY,
        }

    effective: dict[str, Any] = {
        "tier_id": tier.id if tier else None,
        "tier_name": tier.tier_name if tier else None,
    }
    for name in LIMIT_NAMES:
        custom = getattr(settings, f"custom_{name}")
        if custom is not None:
            effective[name] = custom
        elif tier is not None:
            effective[name] = getattr(tier, name)
        else:
            effective[name] = UNCONFIGURED_LIMITS[name]

    features = dict(tier.features or {}) if tier else {}
    features.update(settings.custom_features or {})
    effective["features"] = features

    tier_monthly = tier.monthly_price_cents if tier else 0
    tier_annual = tier.annual_price_cents if tier else 0
    if settings.has_custom_pricing:
        effective["monthly_price_cents"] = (
            settings.custom_monthly_price_cents
            if settings.custom_monthly_price_cents is not None
            else tier_monthly
        )
        effective["annual_price_cents"] = (
            settings.custom_annual_price_cents
            if settings.custom_annual_price_cents is not None
            else tier_annual
        )
    else:
        effective["monthly_price_cents"] = tier_monthly
        effective["annual_price_cents"] = tier_annual
    effective["billing_cycle"] = settings.billing_cycle or BillingCycle.MONTHLY
    return effective


class PackageTierService:
    """Tier catalog and per-business package configuration."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # === Tiers ===

    async def list_tiers(self, include_inactive: bool = False) -> list[PackageTier]:
        query = select(PackageTier)
        if not include_inactive:
            query = query.where(PackageTier.is_active == True)  # noqa: E712
        result = await self.db.execute(query.order_by(PackageTier.display_order, PackageTier.tier_name))
        return list(result.scalars().all())

    async def get_tier(self, tier_id: UUID) -> PackageTier:
        tier = await self.db.get(PackageTier, tier_id)
        if not tier:
            raise NotFoundError("Package tier")
        return tier

    async def create_tier(self, data: dict[str, Any]) -> PackageTier:
        existing = await self.db.execute(
            select(PackageTier.id).where(PackageTier.tier_slug == data["tier_slug"])
        )
        if existing.scalar_one_or_none():
            raise DomainError(f"Tier slug '{data['tier_slug']}' already exists")
        tier = PackageTier(version=1, **data)
        self.db.add(tier)
        await self.db.flush()
        return tier

    async def update_tier(self, tier_id: UUID, data: dict[str, Any]) -> PackageTier:
        """Apply changes and bump the tier's version."""
        tier = await self.get_tier(tier_id)
        for field, value in data.items():
            setattr(tier, field, value)
        tier.version = (tier.version or 1) + 1
        await self.db.flush()
        return tier

    async def delete_tier(self, tier_id: UUID) -> None:
        """Soft delete."""
        tier = await self.get_tier(tier_id)
        tier.is_active = False
        await self.db.flush()

    # === Business settings ===

    async def get_business_settings(
        self, business_id: UUID
    ) -> Optional[BusinessPackageSettings]:
        result = await self.db.execute(
            select(BusinessPackageSettings).where(
                BusinessPackageSettings.business_id == business_id
            )
        )
        return result.scalar_one_or_none()

    async def update_business_settings(
        self,
        business_id: UUID,
        data: dict[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> BusinessPackageSettings:
        """Create or update the business's package settings."""
        if data.get("package_tier_id"):
            await self.get_tier(data["package_tier_id"])

        settings = await self.get_business_settings(business_id)
        if settings is None:
            settings = BusinessPackageSettings(business_id=business_id)
            self.db.add(settings)
        for field, value in data.items():
            setattr(settings, field, value)
        settings.has_custom_limits = any(
            getattr(settings, f"custom_{name}") is not None for name in LIMIT_NAMES
        )
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.PACKAGE_CHANGED,
            resource_type="business_package_settings",
            resource_id=settings.id,
            business_id=business_id,
            user_id=actor_id,
            details={k: str(v) for k, v in data.items()},
        )
        return settings

    async def assign_tier(
        self,
        business_id: UUID,
        tier_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> BusinessPackageSettings:
        settings = await self.update_business_settings(
            business_id, {"package_tier_id": tier_id}, actor_id=actor_id
        )
        logger.info(f"[PACKAGES] Business {business_id} assigned tier {tier_id}")
        return settings

    async def get_effective_package_settings(self, business_id: UUID) -> dict[str, Any]:
        settings = await self.get_business_settings(business_id)
        tier = None
        if settings and settings.package_tier_id:
            tier = await self.db.get(PackageTier, settings.package_tier_id)
        return merge_effective_settings(settings, tier)

    async def check_package_limits(self, business_id: UUID) -> dict[str, Any]:
        """Compare current usage with the effective package."""
        effective = await self.get_effective_package_settings(business_id)
        usage = await EntitlementService(self.db).get_usage(business_id)

        violations = []
        for label, field, resource in VIOLATION_LABELS:
            limit = effective[field]
            if limit >= UNLIMITED:
                continue
            if usage[resource] > limit:
                violations.append(f"{label}: {usage[resource]}/{limit}")
        return {"within_limits": not violations, "violations": violations}
