"""Limit engine: effective limits, usage counts and capacity checks.

Every creation path calls ``ensure_capacity`` before adding its row, so a
rejected request never writes anything.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import LimitReached, LimitedResource
from app.core.money import round_half_up
from app.models.business import BusinessMembership
from app.models.enums import AddonPurchaseStatus, AddonType, BusinessRole
from app.models.package import (
    UNLIMITED,
    AddonProduct,
    AddonPurchase,
    BusinessPackageSettings,
    PackageTier,
)
from app.models.property import Property, Unit
from app.models.tenant import Tenant

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = {
    LimitedResource.BUSINESS: 1,
    LimitedResource.PROPERTY: 5,
    LimitedResource.UNIT: 10,
    LimitedResource.TENANT: 10,
    LimitedResource.TEAM_MEMBER: 1,
}

# resource -> (tier column, override column, add-on type)
LIMIT_FIELDS = {
    LimitedResource.BUSINESS: ("max_businesses", "custom_max_businesses", AddonType.BUSINESS),
    LimitedResource.PROPERTY: ("max_properties", "custom_max_properties", AddonType.PROPERTY),
    LimitedResource.UNIT: ("max_units", "custom_max_units", AddonType.UNIT),
    LimitedResource.TENANT: ("max_tenants", "custom_max_tenants", AddonType.TENANT),
    LimitedResource.TEAM_MEMBER: ("max_users", "custom_max_users", AddonType.TEAM_MEMBER),
}


@dataclass
class ResourceLimit:
    """Effective limit for one resource."""

    limit: int
    is_unlimited: bool


def limit_percentage(current: int, limit: int, is_unlimited: bool) -> int:
    """Usage as a whole percentage of the limit; 0 when unlimited or limit is 0."""
    if is_unlimited or limit <= 0:
        return 0
    return int(round_half_up(current / limit * 100))


class EntitlementService:
    """Computes limits and usage for a business."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load_package(
        self, business_id: UUID
    ) -> tuple[Optional[BusinessPackageSettings], Optional[PackageTier]]:
        result = await self.db.execute(
            select(BusinessPackageSettings).where(
                BusinessPackageSettings.business_id == business_id
            )
        )
        settings = result.scalar_one_or_none()
        tier = None
        if settings and settings.package_tier_id:
            tier = await self.db.get(PackageTier, settings.package_tier_id)
        return settings, tier

    async def _addon_quantities(self, business_id: UUID) -> dict[AddonType, int]:
        result = await self.db.execute(
            select(
                AddonProduct.addon_type,
                func.sum(AddonPurchase.quantity * AddonProduct.quantity_per_unit),
            )
            .join(AddonProduct, AddonPurchase.addon_product_id == AddonProduct.id)
            .where(
                AddonPurchase.business_id == business_id,
                AddonPurchase.status == AddonPurchaseStatus.ACTIVE,
            )
            .group_by(AddonProduct.addon_type)
        )
        return {row[0]: int(row[1] or 0) for row in result.all()}

    async def get_limits(self, business_id: UUID) -> dict[LimitedResource, ResourceLimit]:
        """Effective limit of every resource.

        Base is the business override, else the tier value, else the default.
        A base of ``UNLIMITED`` or more stays unlimited; otherwise active
        add-on quantities are added on top.
        """
        settings, tier = await self._load_package(business_id)
        addons = await self._addon_quantities(business_id)

        limits = {}
        for resource, (tier_field, custom_field, addon_type) in LIMIT_FIELDS.items():
            base = None
            if settings is not None:
                base = getattr(settings, custom_field)
            if base is None and tier is not None:
                base = getattr(tier, tier_field)
            if base is None:
                base = DEFAULT_LIMITS[resource]

            if base >= UNLIMITED:
                limits[resource] = ResourceLimit(limit=base, is_unlimited=True)
            else:
                limits[resource] = ResourceLimit(
                    limit=base + addons.get(addon_type, 0),
                    is_unlimited=False,
                )
        return limits

    async def _owner_business_count(self, business_id: UUID) -> int:
        owner_ids = select(BusinessMembership.user_id).where(
            BusinessMembership.business_id == business_id,
            BusinessMembership.role == BusinessRole.OWNER,
        )
        result = await self.db.execute(
            select(func.count(func.distinct(BusinessMembership.business_id))).where(
                BusinessMembership.user_id.in_(owner_ids),
                BusinessMembership.role == BusinessRole.OWNER,
            )
        )
        return result.scalar() or 0

    async def get_usage(self, business_id: UUID) -> dict[LimitedResource, int]:
        """Current counts of every limited resource."""
        properties = await self.db.execute(
            select(func.count(Property.id)).where(
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
            )
        )
        units = await self.db.execute(
            select(func.count(Unit.id))
            .join(Property, Unit.property_id == Property.id)
            .where(
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
                Unit.is_active == True,  # noqa: E712
            )
        )
        tenants = await self.db.execute(
            select(func.count(Tenant.id))
            .join(Unit, Tenant.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .where(
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
                Unit.is_active == True,  # noqa: E712
                Tenant.is_active == True,  # noqa: E712
            )
        )
        members = await self.db.execute(
            select(func.count(BusinessMembership.id)).where(
                BusinessMembership.business_id == business_id
            )
        )
        return {
            LimitedResource.BUSINESS: await self._owner_business_count(business_id),
            LimitedResource.PROPERTY: properties.scalar() or 0,
            LimitedResource.UNIT: units.scalar() or 0,
            LimitedResource.TENANT: tenants.scalar() or 0,
            LimitedResource.TEAM_MEMBER: members.scalar() or 0,
        }

    async def check_limit(self, business_id: UUID, resource: LimitedResource) -> bool:
        """True when one more ``resource`` may be created."""
        limits = await self.get_limits(business_id)
        usage = await self.get_usage(business_id)
        entry = limits[resource]
        return entry.is_unlimited or usage[resource] < entry.limit

    async def ensure_capacity(self, business_id: UUID, resource: LimitedResource) -> None:
        """Raise ``LimitReached`` when the business is at its limit."""
        limits = await self.get_limits(business_id)
        entry = limits[resource]
        if entry.is_unlimited:
            return
        current = (await self.get_usage(business_id))[resource]
        if current >= entry.limit:
            logger.warning(
                f"[ENTITLEMENTS] Limit reached for business {business_id}: "
                f"{resource.value} {current}/{entry.limit}"
            )
            raise LimitReached(resource, current=current, limit=entry.limit)

    async def get_limit_status(self, business_id: UUID, resource: LimitedResource) -> dict:
        """Usage of one resource against its limit."""
        return (await self.get_usage_summary(business_id))[resource.value]

    async def get_usage_summary(self, business_id: UUID) -> dict[str, dict]:
        """Limit status of every resource, keyed by resource name."""
        limits = await self.get_limits(business_id)
        usage = await self.get_usage(business_id)
        summary = {}
        for resource, entry in limits.items():
            current = usage[resource]
            summary[resource.value] = {
                "resource": resource.value,
                "current": current,
                "limit": entry.limit,
                "percentage": limit_percentage(current, entry.limit, entry.is_unlimited),
                "at_limit": not entry.is_unlimited and current >= entry.limit,
                "is_unlimited": entry.is_unlimited,
            }
        return summary
