"""Platform operator console: stats, business administration, settings."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.business import Business
from app.models.enums import AuditAction, BusinessStatus
from app.models.package import BusinessPackageSettings, PackageTier
from app.models.payment import SystemSetting
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.models.user import User
from app.services.audit import AuditService
from app.services.package_tier import PackageTierService

logger = logging.getLogger(__name__)

SECRET_MARKERS = ("token", "secret", "key", "password")
MASK = "********"


def is_super_admin(user: Any) -> bool:
    return bool(getattr(user, "is_super_admin", False))


def is_secret_setting(setting_key: str) -> bool:
    lowered = setting_key.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def mask_value(setting_key: str, value: Optional[str]) -> Optional[str]:
    if value and is_secret_setting(setting_key):
        return MASK
    return value


class SuperAdminService:
    """Cross-business queries for platform operators."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar_one() or 0

    async def get_platform_stats(self) -> dict[str, Any]:
        by_status_rows = await self.db.execute(
            select(Business.status, func.count(Business.id)).group_by(Business.status)
        )
        businesses_by_status = {status.value: 0 for status in BusinessStatus}
        for status, count in by_status_rows.all():
            businesses_by_status[status.value] = count

        by_tier_rows = await self.db.execute(
            select(PackageTier.tier_name, func.count(BusinessPackageSettings.id))
            .join(PackageTier, BusinessPackageSettings.package_tier_id == PackageTier.id)
            .group_by(PackageTier.tier_name)
        )

        return {
            "total_businesses": sum(businesses_by_status.values()),
            "businesses_by_status": businesses_by_status,
            "total_users": await self._count(select(func.count(User.id))),
            "total_properties": await self._count(
                select(func.count(Property.id)).where(Property.is_active == True)  # noqa: E712
            ),
            "total_units": await self._count(
                select(func.count(Unit.id)).where(Unit.is_active == True)  # noqa: E712
            ),
            "total_tenants": await self._count(
                select(func.count(Tenant.id)).where(Tenant.is_active == True)  # noqa: E712
            ),
            "businesses_by_tier": {name: count for name, count in by_tier_rows.all()},
        }

    # === Businesses ===

    async def list_businesses(
        self,
        status: Optional[BusinessStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Businesses with the name of their current tier."""
        query = (
            select(Business, PackageTier.tier_name)
            .outerjoin(BusinessPackageSettings, BusinessPackageSettings.business_id == Business.id)
            .outerjoin(PackageTier, BusinessPackageSettings.package_tier_id == PackageTier.id)
        )
        if status:
            query = query.where(Business.status == status)
        result = await self.db.execute(
            query.order_by(Business.created_at.desc()).limit(limit).offset(offset)
        )
        return [
            {
                "id": business.id,
                "business_name": business.business_name,
                "email": business.email,
                "status": business.status,
                "tier_name": tier_name,
                "created_at": business.created_at,
            }
            for business, tier_name in result.all()
        ]

    async def get_business(self, business_id: UUID) -> Business:
        business = await self.db.get(Business, business_id)
        if not business:
            raise NotFoundError("Business")
        return business

    async def update_business_status(
        self,
        business_id: UUID,
        status: BusinessStatus,
        admin_id: Optional[UUID] = None,
    ) -> Business:
        business = await self.get_business(business_id)
        previous = business.status
        business.status = status
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.BUSINESS_STATUS_CHANGED,
            resource_type="business",
            resource_id=business.id,
            business_id=business.id,
            user_id=admin_id,
            details={"from": previous.value, "to": status.value},
        )
        logger.info(f"[ADMIN] Business {business.id} status {previous.value} -> {status.value}")
        return business

    async def assign_tier(
        self, business_id: UUID, tier_id: UUID, admin_id: Optional[UUID] = None
    ) -> BusinessPackageSettings:
        await self.get_business(business_id)
        return await PackageTierService(self.db).assign_tier(
            business_id, tier_id, actor_id=admin_id
        )

    # === Platform settings ===

    async def get_setting(self, setting_key: str) -> Optional[SystemSetting]:
        result = await self.db.execute(
            select(SystemSetting).where(SystemSetting.setting_key == setting_key)
        )
        return result.scalar_one_or_none()

    async def get_setting_value(
        self, setting_key: str, default: Optional[str] = None
    ) -> Optional[str]:
        setting = await self.get_setting(setting_key)
        if setting is None or setting.setting_value is None:
            return default
        return setting.setting_value

    async def list_settings(self) -> list[dict[str, Any]]:
        """All settings with secret values masked."""
        result = await self.db.execute(select(SystemSetting).order_by(SystemSetting.setting_key))
        return [
            {
                "setting_key": setting.setting_key,
                "setting_value": mask_value(setting.setting_key, setting.setting_value),
                "description": setting.description,
                "updated_at": setting.updated_at,
            }
            for setting in result.scalars().all()
        ]

    async def upsert_setting(
        self,
        setting_key: str,
        setting_value: Optional[str],
        description: Optional[str] = None,
        admin_id: Optional[UUID] = None,
    ) -> SystemSetting:
        setting = await self.get_setting(setting_key)
        if setting is None:
            setting = SystemSetting(setting_key=setting_key)
            self.db.add(setting)
        setting.setting_value = setting_value
        if description is not None:
            setting.description = description
        setting.updated_by_id = admin_id
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.SETTING_UPDATED,
            resource_type="system_setting",
            resource_id=setting.id,
            user_id=admin_id,
            details={"setting_key": setting_key},
        )
        return setting
