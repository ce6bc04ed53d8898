"""Entitlements router - limits, usage and feature access for the current business."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.errors import LimitedResource
from app.core.security import AuthenticatedUser, require_business_member
from app.schemas.base import LimitStatus
from app.schemas.package import (
    EffectivePackageSettings,
    FeatureAccess,
    PackageLimitCheck,
    UsageSummary,
)
from app.services.entitlements import EntitlementService
from app.services.feature import FeatureService
from app.services.package_tier import PackageTierService

router = APIRouter(prefix="/entitlements", tags=["entitlements"])


@router.get("/usage", response_model=UsageSummary)
async def get_usage_summary(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Usage of every limited resource against its effective limit."""
    summary = await EntitlementService(db).get_usage_summary(current_user.business_id)
    return UsageSummary(**summary)


@router.get("/package", response_model=EffectivePackageSettings)
async def get_effective_package(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Tier limits and features after per-business overrides."""
    effective = await PackageTierService(db).get_effective_package_settings(
        current_user.business_id
    )
    return EffectivePackageSettings(**effective)


@router.get("/package/check", response_model=PackageLimitCheck)
async def check_package_limits(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Whether current usage fits the effective package."""
    result = await PackageTierService(db).check_package_limits(current_user.business_id)
    return PackageLimitCheck(**result)


@router.get("/features/{slug}", response_model=FeatureAccess)
async def check_feature_access(
    slug: str,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Whether the business may use a feature."""
    has_access = await FeatureService(db).business_has_feature(current_user.business_id, slug)
    return FeatureAccess(slug=slug, has_access=has_access)


@router.get("/{resource}", response_model=LimitStatus)
async def get_limit_status(
    resource: LimitedResource,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Usage of one resource against its limit."""
    status = await EntitlementService(db).get_limit_status(current_user.business_id, resource)
    return LimitStatus(**status)
