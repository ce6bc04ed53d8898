"""Feature catalog and business feature access."""

import pytest

from app.core.errors import DomainError
from app.models.enums import AddonType, FeatureCategory
from app.models.package import AddonProduct
from app.services.addon import AddonService
from app.services.feature import FeatureService, category_display_name
from app.services.package_tier import PackageTierService


@pytest.fixture
async def tier(db, business):
    tiers = PackageTierService(db)
    tier = await tiers.create_tier(
        {
            "tier_name": "Growth",
            "tier_slug": "growth",
            "display_name": "Growth",
            "features": {"online_payments": True},
        }
    )
    await tiers.assign_tier(business.id, tier.id)
    await db.commit()
    return tier


def test_category_display_name():
    assert category_display_name(FeatureCategory.TEAM) == "Team & Collaboration"
    assert category_display_name(FeatureCategory.AI) == "AI Features"


async def test_duplicate_slug_rejected(db):
    features = FeatureService(db)
    await features.create_feature({"slug": "ai_listing_copy", "name": "AI listing copy"})
    with pytest.raises(DomainError, match="already exists"):
        await features.create_feature({"slug": "ai_listing_copy", "name": "Again"})


async def test_feature_access_sources(db, business, tier):
    features = FeatureService(db)
    screening = await features.create_feature({"slug": "tenant_screening", "name": "Screening"})
    branding = await features.create_feature({"slug": "custom_branding", "name": "Branding"})

    # From the tier's feature flags
    assert await features.business_has_feature(business.id, "online_payments")
    assert not await features.business_has_feature(business.id, "tenant_screening")
    assert not await features.business_has_feature(business.id, "no_such_feature")

    await features.set_tier_features(tier.id, [screening.id])
    assert await features.business_has_feature(business.id, "tenant_screening")

    product = AddonProduct(
        name="Custom branding",
        addon_type=AddonType.BUSINESS,
        quantity_per_unit=0,
        price_cents=1500,
        feature_id=branding.id,
    )
    db.add(product)
    await db.flush()
    assert not await features.business_has_feature(business.id, "custom_branding")
    await AddonService(db).purchase_addon(business.id, product.id)
    assert await features.business_has_feature(business.id, "custom_branding")


async def test_custom_features_override_tier(db, business, tier):
    await PackageTierService(db).update_business_settings(
        business.id, {"custom_features": {"online_payments": False}}
    )
    assert not await FeatureService(db).business_has_feature(business.id, "online_payments")


async def test_tier_addon_pricing(db, tier):
    features = FeatureService(db)
    feature = await features.create_feature({"slug": "owner_portal", "name": "Owner portal"})
    await features.upsert_tier_addon(tier.id, feature.id, 900)
    await features.upsert_tier_addon(tier.id, feature.id, 1200)

    config = await features.get_feature_with_tier_config(feature.id)
    assert len(config["addon_offers"]) == 1
    assert config["addon_offers"][0]["formatted_price"] == "$12.00"
    assert config["included_in_tier_ids"] == []


async def test_feature_endpoint(client, business, tier):
    response = await client.get("/v1/entitlements/features/online_payments")
    assert response.status_code == 200
    assert response.json() == {"slug": "online_payments", "has_access": True}
