"""Lease service."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.models.enums import AuditAction, LeaseStatus, OccupancyStatus
from app.models.lease import Lease
from app.models.property import Property, Unit
from app.services.audit import AuditService
from app.services.tenant import TenantService
from app.services.unit import UnitService

ACTIVATABLE = (LeaseStatus.DRAFT, LeaseStatus.PENDING_SIGNATURE)


class LeaseService:
    """Business-scoped leases and their lifecycle."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.units = UnitService(db)

    def _scoped(self, business_id: UUID):
        return (
            select(Lease)
            .join(Unit, Lease.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .where(Property.business_id == business_id)
        )

    async def get_lease(self, business_id: UUID, lease_id: UUID) -> Lease:
        result = await self.db.execute(self._scoped(business_id).where(Lease.id == lease_id))
        lease = result.scalar_one_or_none()
        if not lease:
            raise NotFoundError("Lease")
        return lease

    async def list_leases(
        self,
        business_id: UUID,
        status: Optional[LeaseStatus] = None,
        unit_id: Optional[UUID] = None,
    ) -> list[Lease]:
        query = self._scoped(business_id)
        if status:
            query = query.where(Lease.status == status)
        if unit_id:
            query = query.where(Lease.unit_id == unit_id)
        result = await self.db.execute(query.order_by(Lease.start_date.desc()))
        return list(result.scalars().all())

    async def create_lease(self, business_id: UUID, data: dict[str, Any]) -> Lease:
        await self.units.get_unit(business_id, data["unit_id"])
        if data.get("tenant_id"):
            await TenantService(self.db).get_tenant(business_id, data["tenant_id"])

        lease = Lease(status=LeaseStatus.DRAFT, **data)
        self.db.add(lease)
        await self.db.flush()
        return lease

    async def update_lease(
        self, business_id: UUID, lease_id: UUID, data: dict[str, Any]
    ) -> Lease:
        lease = await self.get_lease(business_id, lease_id)
        if lease.status not in ACTIVATABLE:
            raise InvalidStateError("Only draft or pending leases can be edited")
        for field, value in data.items():
            setattr(lease, field, value)
        if lease.end_date and lease.end_date <= lease.start_date:
            raise DomainError("end_date must be after start_date")
        await self.db.flush()
        return lease

    async def activate_lease(
        self, business_id: UUID, lease_id: UUID, actor_id: Optional[UUID] = None
    ) -> Lease:
        """Draft or pending-signature lease becomes active; the unit is occupied."""
        lease = await self.get_lease(business_id, lease_id)
        if lease.status not in ACTIVATABLE:
            raise InvalidStateError(f"Cannot activate a lease with status {lease.status.value}")

        lease.status = LeaseStatus.ACTIVE
        lease.activated_at = datetime.utcnow()
        unit = await self.db.get(Unit, lease.unit_id)
        unit.occupancy_status = OccupancyStatus.OCCUPIED
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.LEASE_ACTIVATED,
            resource_type="lease",
            resource_id=lease.id,
            business_id=business_id,
            user_id=actor_id,
        )
        return lease

    async def terminate_lease(
        self, business_id: UUID, lease_id: UUID, actor_id: Optional[UUID] = None
    ) -> Lease:
        lease = await self.get_lease(business_id, lease_id)
        if lease.status != LeaseStatus.ACTIVE:
            raise InvalidStateError("Only active leases can be terminated")

        lease.status = LeaseStatus.TERMINATED
        lease.terminated_at = datetime.utcnow()
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.LEASE_TERMINATED,
            resource_type="lease",
            resource_id=lease.id,
            business_id=business_id,
            user_id=actor_id,
        )
        return lease
