"""Unit service; units are scoped through their property's business."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import LimitedResource, NotFoundError
from app.models.enums import LeaseStatus, OccupancyStatus
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.services.entitlements import EntitlementService
from app.services.onboarding import OnboardingService
from app.services.property import OPEN_MAINTENANCE, PropertyService


class UnitService:
    """CRUD and queries over units of a business."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.entitlements = EntitlementService(db)
        self.properties = PropertyService(db)

    def _scoped(self, business_id: UUID):
        return (
            select(Unit)
            .join(Property, Unit.property_id == Property.id)
            .where(
                Property.business_id == business_id,
                Property.is_active == True,  # noqa: E712
                Unit.is_active == True,  # noqa: E712
            )
        )

    async def get_unit(self, business_id: UUID, unit_id: UUID) -> Unit:
        result = await self.db.execute(self._scoped(business_id).where(Unit.id == unit_id))
        unit = result.scalar_one_or_none()
        if not unit:
            raise NotFoundError("Unit")
        return unit

    async def create_unit(
        self,
        business_id: UUID,
        property_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> Unit:
        """Create a unit after checking the unit limit."""
        await self.properties.get_property(business_id, property_id)
        await self.entitlements.ensure_capacity(business_id, LimitedResource.UNIT)

        unit = Unit(property_id=property_id, **data)
        self.db.add(unit)
        await self.db.flush()

        if created_by_id:
            await OnboardingService(self.db).record_unit_created(
                created_by_id, property_id, unit.id
            )
        return unit

    async def update_unit(self, business_id: UUID, unit_id: UUID, data: dict[str, Any]) -> Unit:
        unit = await self.get_unit(business_id, unit_id)
        for field, value in data.items():
            setattr(unit, field, value)
        await self.db.flush()
        return unit

    async def delete_unit(self, business_id: UUID, unit_id: UUID) -> None:
        """Soft delete."""
        unit = await self.get_unit(business_id, unit_id)
        unit.is_active = False
        await self.db.flush()

    async def list_by_status(self, business_id: UUID, status: OccupancyStatus) -> list[Unit]:
        result = await self.db.execute(
            self._scoped(business_id)
            .where(Unit.occupancy_status == status)
            .order_by(Property.name, Unit.unit_number)
        )
        return list(result.scalars().all())

    async def list_vacant_units(self, business_id: UUID) -> list[Unit]:
        return await self.list_by_status(business_id, OccupancyStatus.VACANT)

    async def list_occupied_units(self, business_id: UUID) -> list[Unit]:
        return await self.list_by_status(business_id, OccupancyStatus.OCCUPIED)

    async def update_occupancy_status(
        self, business_id: UUID, unit_id: UUID, status: OccupancyStatus
    ) -> Unit:
        unit = await self.get_unit(business_id, unit_id)
        unit.occupancy_status = status
        await self.db.flush()
        return unit

    async def get_unit_tenants(self, business_id: UUID, unit_id: UUID) -> list[Tenant]:
        await self.get_unit(business_id, unit_id)
        result = await self.db.execute(
            select(Tenant)
            .where(
                Tenant.unit_id == unit_id,
                Tenant.is_active == True,  # noqa: E712
            )
            .order_by(Tenant.last_name, Tenant.first_name)
        )
        return list(result.scalars().all())

    async def get_unit_lease(self, business_id: UUID, unit_id: UUID) -> Optional[Lease]:
        """The unit's active lease, if any."""
        await self.get_unit(business_id, unit_id)
        result = await self.db.execute(
            select(Lease)
            .where(Lease.unit_id == unit_id, Lease.status == LeaseStatus.ACTIVE)
            .order_by(Lease.start_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_unit_stats(self, business_id: UUID, unit_id: UUID) -> dict:
        unit = await self.get_unit(business_id, unit_id)
        tenants = await self.get_unit_tenants(business_id, unit_id)
        lease = await self.get_unit_lease(business_id, unit_id)
        maintenance = await self.db.execute(
            select(func.count(MaintenanceRequest.id)).where(
                MaintenanceRequest.unit_id == unit_id,
                MaintenanceRequest.status.in_(OPEN_MAINTENANCE),
            )
        )
        return {
            "tenant_count": len(tenants),
            "has_active_lease": lease is not None,
            "monthly_rent_cents": unit.monthly_rent_cents or 0,
            "open_maintenance": maintenance.scalar() or 0,
        }
