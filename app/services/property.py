"""Property service (business-scoped)."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import LimitedResource, NotFoundError
from app.models.enums import MaintenanceStatus, OccupancyStatus
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.services.entitlements import EntitlementService
from app.services.onboarding import OnboardingService

logger = logging.getLogger(__name__)

OPEN_MAINTENANCE = (MaintenanceStatus.OPEN, MaintenanceStatus.IN_PROGRESS)


class PropertyService:
    """CRUD and statistics for a business's properties."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.entitlements = EntitlementService(db)

    async def list_properties(self, business_id: UUID) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
            )
            .order_by(Property.name)
        )
        return list(result.scalars().all())

    async def get_property(self, business_id: UUID, property_id: UUID) -> Property:
        result = await self.db.execute(
            select(Property).where(
                Property.id == property_id,
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
            )
        )
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFoundError("Property")
        return prop

    async def create_property(
        self,
        business_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> Property:
        """Create a property after checking the property limit."""
        await self.entitlements.ensure_capacity(business_id, LimitedResource.PROPERTY)

        prop = Property(business_id=business_id, created_by_id=created_by_id, **data)
        self.db.add(prop)
        await self.db.flush()

        if created_by_id:
            await OnboardingService(self.db).mark_property_added(created_by_id, prop.id)
        return prop

    async def update_property(
        self, business_id: UUID, property_id: UUID, data: dict[str, Any]
    ) -> Property:
        prop = await self.get_property(business_id, property_id)
        for field, value in data.items():
            setattr(prop, field, value)
        await self.db.flush()
        return prop

    async def delete_property(self, business_id: UUID, property_id: UUID) -> None:
        """Soft delete."""
        prop = await self.get_property(business_id, property_id)
        prop.is_active = False
        await self.db.flush()

    async def get_property_units(self, business_id: UUID, property_id: UUID) -> list[Unit]:
        await self.get_property(business_id, property_id)
        result = await self.db.execute(
            select(Unit)
            .where(
                Unit.property_id == property_id,
                Unit.is_active == True,  # noqa: E712
            )
            .order_by(Unit.unit_number)
        )
        return list(result.scalars().all())

    async def get_property_stats(self, business_id: UUID, property_id: UUID) -> dict:
        units = await self.get_property_units(business_id, property_id)
        unit_ids = [u.id for u in units]
        occupied = [u for u in units if u.occupancy_status == OccupancyStatus.OCCUPIED]

        active_tenants = 0
        open_maintenance = 0
        if unit_ids:
            tenants = await self.db.execute(
                select(func.count(Tenant.id)).where(
                    Tenant.unit_id.in_(unit_ids),
                    Tenant.is_active == True,  # noqa: E712
                )
            )
            active_tenants = tenants.scalar() or 0
            maintenance = await self.db.execute(
                select(func.count(MaintenanceRequest.id)).where(
                    MaintenanceRequest.unit_id.in_(unit_ids),
                    MaintenanceRequest.status.in_(OPEN_MAINTENANCE),
                )
            )
            open_maintenance = maintenance.scalar() or 0

        return {
            "total_units": len(units),
            "occupied_units": len(occupied),
            "vacant_units": sum(
                1 for u in units if u.occupancy_status == OccupancyStatus.VACANT
            ),
            "active_tenants": active_tenants,
            "monthly_revenue_cents": sum(u.monthly_rent_cents or 0 for u in occupied),
            "open_maintenance": open_maintenance,
        }

    async def can_create_property(self, business_id: UUID) -> dict:
        return await self.entitlements.get_limit_status(business_id, LimitedResource.PROPERTY)
