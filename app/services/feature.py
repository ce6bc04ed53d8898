"""Feature catalog, tier inclusion and tier add-on pricing."""

from typing import Any
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, NotFoundError
from app.core.money import format_cents
from app.models.enums import AddonPurchaseStatus, BillingCycle, FeatureCategory
from app.models.package import (
    AddonProduct,
    AddonPurchase,
    Feature,
    TierAddon,
    TierFeature,
)
from app.services.package_tier import PackageTierService

CATEGORY_DISPLAY_NAMES = {
    FeatureCategory.CORE: "Core Features",
    FeatureCategory.ADVANCED: "Advanced Features",
    FeatureCategory.AI: "AI Features",
    FeatureCategory.PAYMENTS: "Payments",
    FeatureCategory.BRANDING: "Branding",
    FeatureCategory.TEAM: "Team & Collaboration",
    FeatureCategory.ENTERPRISE: "Enterprise",
}


def category_display_name(category: FeatureCategory) -> str:
    return CATEGORY_DISPLAY_NAMES.get(category, category.value.replace("_", " ").title())


class FeatureService:
    """Feature catalog and entitlement lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tiers = PackageTierService(db)

    async def list_features(self, include_inactive: bool = False) -> list[Feature]:
        query = select(Feature)
        if not include_inactive:
            query = query.where(Feature.is_active == True)  # noqa: E712
        result = await self.db.execute(
            query.order_by(Feature.category, Feature.display_order, Feature.name)
        )
        return list(result.scalars().all())

    async def get_feature(self, feature_id: UUID) -> Feature:
        feature = await self.db.get(Feature, feature_id)
        if not feature:
            raise NotFoundError("Feature")
        return feature

    async def create_feature(self, data: dict[str, Any]) -> Feature:
        existing = await self.db.execute(select(Feature.id).where(Feature.slug == data["slug"]))
        if existing.scalar_one_or_none():
            raise DomainError(f"Feature slug '{data['slug']}' already exists")
        feature = Feature(**data)
        self.db.add(feature)
        await self.db.flush()
        return feature

    async def update_feature(self, feature_id: UUID, data: dict[str, Any]) -> Feature:
        feature = await self.get_feature(feature_id)
        for field, value in data.items():
            setattr(feature, field, value)
        await self.db.flush()
        return feature

    async def delete_feature(self, feature_id: UUID) -> None:
        """Soft delete."""
        feature = await self.get_feature(feature_id)
        feature.is_active = False
        await self.db.flush()

    # === Tier inclusion ===

    async def get_tier_features(self, tier_id: UUID) -> list[Feature]:
        await self.tiers.get_tier(tier_id)
        result = await self.db.execute(
            select(Feature)
            .join(TierFeature, TierFeature.feature_id == Feature.id)
            .where(TierFeature.tier_id == tier_id)
            .order_by(Feature.category, Feature.display_order)
        )
        return list(result.scalars().all())

    async def set_tier_features(self, tier_id: UUID, feature_ids: list[UUID]) -> list[Feature]:
        """Replace the set of features included in a tier."""
        await self.tiers.get_tier(tier_id)
        for feature_id in set(feature_ids):
            await self.get_feature(feature_id)

        await self.db.execute(delete(TierFeature).where(TierFeature.tier_id == tier_id))
        for feature_id in dict.fromkeys(feature_ids):
            self.db.add(TierFeature(tier_id=tier_id, feature_id=feature_id))
        await self.db.flush()
        return await self.get_tier_features(tier_id)

    # === Tier add-ons ===

    async def get_tier_addons(self, tier_id: UUID) -> list[TierAddon]:
        await self.tiers.get_tier(tier_id)
        result = await self.db.execute(
            select(TierAddon).where(TierAddon.tier_id == tier_id).order_by(TierAddon.price_cents)
        )
        return list(result.scalars().all())

    async def upsert_tier_addon(
        self,
        tier_id: UUID,
        feature_id: UUID,
        price_cents: int,
        billing_period: BillingCycle = BillingCycle.MONTHLY,
    ) -> TierAddon:
        await self.tiers.get_tier(tier_id)
        await self.get_feature(feature_id)
        result = await self.db.execute(
            select(TierAddon).where(
                TierAddon.tier_id == tier_id,
                TierAddon.feature_id == feature_id,
            )
        )
        addon = result.scalar_one_or_none()
        if addon is None:
            addon = TierAddon(tier_id=tier_id, feature_id=feature_id)
            self.db.add(addon)
        addon.price_cents = price_cents
        addon.billing_period = billing_period
        await self.db.flush()
        return addon

    async def remove_tier_addon(self, tier_id: UUID, feature_id: UUID) -> None:
        result = await self.db.execute(
            select(TierAddon).where(
                TierAddon.tier_id == tier_id,
                TierAddon.feature_id == feature_id,
            )
        )
        addon = result.scalar_one_or_none()
        if not addon:
            raise NotFoundError("Tier add-on")
        await self.db.delete(addon)
        await self.db.flush()

    async def get_feature_with_tier_config(self, feature_id: UUID) -> dict[str, Any]:
        """The feature, the tiers including it and where it is sold as an add-on."""
        feature = await self.get_feature(feature_id)
        included = await self.db.execute(
            select(TierFeature.tier_id).where(TierFeature.feature_id == feature_id)
        )
        offers = await self.db.execute(
            select(TierAddon).where(TierAddon.feature_id == feature_id)
        )
        return {
            "feature": feature,
            "included_in_tier_ids": list(included.scalars().all()),
            "addon_offers": [
                {
                    "id": offer.id,
                    "tier_id": offer.tier_id,
                    "feature_id": offer.feature_id,
                    "price_cents": offer.price_cents,
                    "billing_period": offer.billing_period,
                    "formatted_price": format_cents(offer.price_cents),
                }
                for offer in offers.scalars().all()
            ],
        }

    async def business_has_feature(self, business_id: UUID, slug: str) -> bool:
        """Enabled by the effective features, the tier, or an active add-on."""
        effective = await self.tiers.get_effective_package_settings(business_id)
        if effective["features"].get(slug):
            return True

        feature_result = await self.db.execute(
            select(Feature).where(Feature.slug == slug, Feature.is_active == True)  # noqa: E712
        )
        feature = feature_result.scalar_one_or_none()
        if feature is None:
            return False

        if effective["tier_id"]:
            included = await self.db.execute(
                select(TierFeature.id).where(
                    TierFeature.tier_id == effective["tier_id"],
                    TierFeature.feature_id == feature.id,
                )
            )
            if included.scalar_one_or_none():
                return True

        purchased = await self.db.execute(
            select(AddonPurchase.id)
            .join(AddonProduct, AddonPurchase.addon_product_id == AddonProduct.id)
            .where(
                AddonPurchase.business_id == business_id,
                AddonPurchase.status == AddonPurchaseStatus.ACTIVE,
                AddonProduct.feature_id == feature.id,
            )
            .limit(1)
        )
        return purchased.scalar_one_or_none() is not None
