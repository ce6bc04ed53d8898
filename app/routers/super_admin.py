"""Super-admin console - platform stats, businesses, packages, settings, jobs."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.money import format_cents
from app.core.security import AuthenticatedUser, require_super_admin
from app.models.enums import BusinessStatus, JobStatus
from app.routers.addons import product_response
from app.routers.features import feature_response
from app.schemas.admin import (
    AdminBusinessResponse,
    BusinessStatusUpdate,
    JobFailure,
    JobResponse,
    PlatformStats,
    SystemSettingResponse,
    SystemSettingUpsert,
)
from app.schemas.business import BusinessResponse
from app.schemas.package import (
    AddonProductCreate,
    AddonProductResponse,
    AddonProductUpdate,
    BusinessPackageSettingsUpdate,
    EffectivePackageSettings,
    FeatureCreate,
    FeatureResponse,
    FeatureTierConfig,
    FeatureUpdate,
    PackageTierCreate,
    PackageTierResponse,
    PackageTierUpdate,
    TierAddonResponse,
    TierAddonUpsert,
    TierAssign,
    TierFeaturesSet,
)
from app.services.addon import AddonService
from app.services.feature import FeatureService
from app.services.jobs import JobsService
from app.services.package_tier import PackageTierService
from app.services.super_admin import SuperAdminService, mask_value

router = APIRouter(prefix="/super-admin", tags=["super-admin"])


# === Platform ===

@router.get("/stats", response_model=PlatformStats)
async def get_platform_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Platform-wide totals."""
    return PlatformStats(**await SuperAdminService(db).get_platform_stats())


@router.get("/businesses", response_model=List[AdminBusinessResponse])
async def list_businesses(
    status_filter: Optional[BusinessStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """All businesses with their tier."""
    rows = await SuperAdminService(db).list_businesses(status_filter, limit, offset)
    return [AdminBusinessResponse(**row) for row in rows]


@router.put("/businesses/{business_id}/status", response_model=BusinessResponse)
async def update_business_status(
    business_id: UUID,
    data: BusinessStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Activate, suspend or cancel a business."""
    business = await SuperAdminService(db).update_business_status(
        business_id, data.status, admin_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(business)
    return BusinessResponse.model_validate(business)


@router.put("/businesses/{business_id}/tier", response_model=EffectivePackageSettings)
async def assign_tier(
    business_id: UUID,
    data: TierAssign,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Move a business to another tier."""
    await SuperAdminService(db).assign_tier(
        business_id, data.package_tier_id, admin_id=current_user.db_user_id
    )
    await db.commit()
    effective = await PackageTierService(db).get_effective_package_settings(business_id)
    return EffectivePackageSettings(**effective)


@router.get("/businesses/{business_id}/package", response_model=EffectivePackageSettings)
async def get_business_package(
    business_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """A business's effective package."""
    await SuperAdminService(db).get_business(business_id)
    effective = await PackageTierService(db).get_effective_package_settings(business_id)
    return EffectivePackageSettings(**effective)


@router.put("/businesses/{business_id}/package", response_model=EffectivePackageSettings)
async def update_business_package(
    business_id: UUID,
    data: BusinessPackageSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Set per-business limit and pricing overrides."""
    await SuperAdminService(db).get_business(business_id)
    service = PackageTierService(db)
    await service.update_business_settings(
        business_id, data.model_dump(exclude_unset=True), actor_id=current_user.db_user_id
    )
    await db.commit()
    return EffectivePackageSettings(**await service.get_effective_package_settings(business_id))


# === Tiers ===

@router.get("/tiers", response_model=List[PackageTierResponse])
async def list_tiers(
    include_inactive: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Package tiers in display order."""
    tiers = await PackageTierService(db).list_tiers(include_inactive)
    return [PackageTierResponse.model_validate(t) for t in tiers]


@router.post("/tiers", response_model=PackageTierResponse, status_code=status.HTTP_201_CREATED)
async def create_tier(
    data: PackageTierCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Create a package tier."""
    tier = await PackageTierService(db).create_tier(data.model_dump())
    await db.commit()
    await db.refresh(tier)
    return PackageTierResponse.model_validate(tier)


@router.patch("/tiers/{tier_id}", response_model=PackageTierResponse)
async def update_tier(
    tier_id: UUID,
    data: PackageTierUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Update a tier (bumps its version)."""
    tier = await PackageTierService(db).update_tier(tier_id, data.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(tier)
    return PackageTierResponse.model_validate(tier)


@router.delete("/tiers/{tier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tier(
    tier_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Deactivate a tier."""
    await PackageTierService(db).delete_tier(tier_id)
    await db.commit()


@router.get("/tiers/{tier_id}/features", response_model=List[FeatureResponse])
async def get_tier_features(
    tier_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Features included in a tier."""
    features = await FeatureService(db).get_tier_features(tier_id)
    return [feature_response(f) for f in features]


@router.put("/tiers/{tier_id}/features", response_model=List[FeatureResponse])
async def set_tier_features(
    tier_id: UUID,
    data: TierFeaturesSet,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Replace the features included in a tier."""
    features = await FeatureService(db).set_tier_features(tier_id, data.feature_ids)
    await db.commit()
    return [feature_response(f) for f in features]


def tier_addon_response(offer) -> TierAddonResponse:
    response = TierAddonResponse.model_validate(offer)
    response.formatted_price = format_cents(offer.price_cents)
    return response


@router.get("/tiers/{tier_id}/addons", response_model=List[TierAddonResponse])
async def get_tier_addons(
    tier_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Features sold to this tier as add-ons."""
    offers = await FeatureService(db).get_tier_addons(tier_id)
    return [tier_addon_response(o) for o in offers]


@router.put("/tiers/{tier_id}/addons", response_model=TierAddonResponse)
async def upsert_tier_addon(
    tier_id: UUID,
    data: TierAddonUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Offer a feature to a tier as a paid add-on."""
    offer = await FeatureService(db).upsert_tier_addon(
        tier_id, data.feature_id, data.price_cents, data.billing_period
    )
    await db.commit()
    await db.refresh(offer)
    return tier_addon_response(offer)


@router.delete("/tiers/{tier_id}/addons/{feature_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_tier_addon(
    tier_id: UUID,
    feature_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Stop offering a feature as an add-on to a tier."""
    await FeatureService(db).remove_tier_addon(tier_id, feature_id)
    await db.commit()


# === Features ===

@router.get("/features", response_model=List[FeatureResponse])
async def list_features(
    include_inactive: bool = True,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Feature catalog."""
    features = await FeatureService(db).list_features(include_inactive)
    return [feature_response(f) for f in features]


@router.post("/features", response_model=FeatureResponse, status_code=status.HTTP_201_CREATED)
async def create_feature(
    data: FeatureCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Add a feature to the catalog."""
    feature = await FeatureService(db).create_feature(data.model_dump())
    await db.commit()
    await db.refresh(feature)
    return feature_response(feature)


@router.patch("/features/{feature_id}", response_model=FeatureResponse)
async def update_feature(
    feature_id: UUID,
    data: FeatureUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Update a feature."""
    feature = await FeatureService(db).update_feature(
        feature_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(feature)
    return feature_response(feature)


@router.delete("/features/{feature_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feature(
    feature_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Deactivate a feature."""
    await FeatureService(db).delete_feature(feature_id)
    await db.commit()


@router.get("/features/{feature_id}/tiers", response_model=FeatureTierConfig)
async def get_feature_tier_config(
    feature_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Tiers that include a feature and tiers it is sold to."""
    config = await FeatureService(db).get_feature_with_tier_config(feature_id)
    return FeatureTierConfig(
        feature=feature_response(config["feature"]),
        included_in_tier_ids=config["included_in_tier_ids"],
        addon_offers=[TierAddonResponse(**offer) for offer in config["addon_offers"]],
    )


# === Add-on products ===

@router.get("/addon-products", response_model=List[AddonProductResponse])
async def list_addon_products(
    include_inactive: bool = True,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Add-on catalog."""
    products = await AddonService(db).list_products(include_inactive)
    return [product_response(p) for p in products]


@router.post(
    "/addon-products",
    response_model=AddonProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_addon_product(
    data: AddonProductCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Create an add-on product."""
    product = await AddonService(db).create_product(data.model_dump())
    await db.commit()
    await db.refresh(product)
    return product_response(product)


@router.patch("/addon-products/{product_id}", response_model=AddonProductResponse)
async def update_addon_product(
    product_id: UUID,
    data: AddonProductUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Update an add-on product."""
    product = await AddonService(db).update_product(
        product_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(product)
    return product_response(product)


# === Settings ===

@router.get("/settings", response_model=List[SystemSettingResponse])
async def list_settings(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Platform settings with secrets masked."""
    settings = await SuperAdminService(db).list_settings()
    return [SystemSettingResponse(**s) for s in settings]


@router.put("/settings/{setting_key}", response_model=SystemSettingResponse)
async def upsert_setting(
    setting_key: str,
    data: SystemSettingUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Create or replace a platform setting."""
    setting = await SuperAdminService(db).upsert_setting(
        setting_key,
        data.setting_value,
        description=data.description,
        admin_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(setting)
    return SystemSettingResponse(
        setting_key=setting.setting_key,
        setting_value=mask_value(setting.setting_key, setting.setting_value),
        description=setting.description,
        updated_at=setting.updated_at,
    )


# === Jobs outbox ===

@router.get("/jobs", response_model=List[JobResponse])
async def list_jobs(
    status_filter: Optional[JobStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Outbox jobs, newest first."""
    jobs = await JobsService(db).list_jobs(status_filter, limit)
    return [JobResponse.model_validate(j) for j in jobs]


@router.post("/jobs/claim", response_model=List[JobResponse])
async def claim_jobs(
    job_type: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Claim due jobs for delivery."""
    jobs = await JobsService(db).claim_pending_jobs(job_type, limit)
    await db.commit()
    return [JobResponse.model_validate(j) for j in jobs]


@router.post("/jobs/{job_id}/complete", status_code=status.HTTP_204_NO_CONTENT)
async def complete_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Mark a job delivered."""
    await JobsService(db).complete_job(job_id)
    await db.commit()


@router.post("/jobs/{job_id}/fail")
async def fail_job(
    job_id: UUID,
    data: JobFailure,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Record a failed attempt; the job is retried or dead-lettered."""
    new_status = await JobsService(db).fail_job(job_id, data.error, data.dead_letter)
    await db.commit()
    return {"job_id": str(job_id), "status": new_status.value if new_status else None}
