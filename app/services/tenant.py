"""Tenant (renter) service."""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError, LimitedResource, NotFoundError
from app.models.enums import (
    AuditAction,
    LeaseStatus,
    OccupancyStatus,
    PaymentStatus,
    TenantStatus,
    TenantType,
)
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.payment import RentPayment
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.services.audit import AuditService
from app.services.entitlements import EntitlementService
from app.services.jobs import JobsService
from app.services.unit import UnitService

logger = logging.getLogger(__name__)

OCCUPYING_TYPES = (TenantType.PRIMARY, TenantType.CO_TENANT)


class TenantService:
    """Business-scoped tenant management."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.entitlements = EntitlementService(db)
        self.units = UnitService(db)

    def _scoped(self, business_id: UUID):
        return (
            select(Tenant)
            .join(Unit, Tenant.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .where(
                Property.business_id == business_id,
                Tenant.is_active == True,  # noqa: E712
            )
        )

    async def get_tenant(self, business_id: UUID, tenant_id: UUID) -> Tenant:
        result = await self.db.execute(self._scoped(business_id).where(Tenant.id == tenant_id))
        tenant = result.scalar_one_or_none()
        if not tenant:
            raise NotFoundError("Tenant")
        return tenant

    async def list_tenants(
        self, business_id: UUID, status: Optional[TenantStatus] = None
    ) -> list[Tenant]:
        query = self._scoped(business_id)
        if status:
            query = query.where(Tenant.status == status)
        result = await self.db.execute(query.order_by(Tenant.last_name, Tenant.first_name))
        return list(result.scalars().all())

    async def get_active_tenants(self, business_id: UUID) -> list[Tenant]:
        return await self.list_tenants(business_id, TenantStatus.ACTIVE)

    async def search_tenants(self, business_id: UUID, q: str) -> list[Tenant]:
        """Case-insensitive match on first name, last name or e-mail."""
        pattern = f"%{q.strip().lower()}%"
        result = await self.db.execute(
            self._scoped(business_id)
            .where(
                or_(
                    func.lower(Tenant.first_name).like(pattern),
                    func.lower(Tenant.last_name).like(pattern),
                    func.lower(Tenant.email).like(pattern),
                )
            )
            .order_by(Tenant.last_name, Tenant.first_name)
        )
        return list(result.scalars().all())

    async def create_tenant(
        self,
        business_id: UUID,
        data: dict[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> Tenant:
        """Create a tenant after checking the tenant limit.

        Primary and co-tenants mark their unit occupied.
        """
        unit = await self.units.get_unit(business_id, data["unit_id"])
        await self.entitlements.ensure_capacity(business_id, LimitedResource.TENANT)

        tenant = Tenant(**data)
        self.db.add(tenant)
        if tenant.tenant_type in OCCUPYING_TYPES or tenant.tenant_type is None:
            unit.occupancy_status = OccupancyStatus.OCCUPIED
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.TENANT_CREATED,
            resource_type="tenant",
            resource_id=tenant.id,
            business_id=business_id,
            user_id=actor_id,
            details={"unit_id": str(unit.id), "email": tenant.email},
        )
        return tenant

    async def update_tenant(
        self, business_id: UUID, tenant_id: UUID, data: dict[str, Any]
    ) -> Tenant:
        tenant = await self.get_tenant(business_id, tenant_id)
        if "unit_id" in data and data["unit_id"] is not None:
            await self.units.get_unit(business_id, data["unit_id"])
        for field, value in data.items():
            setattr(tenant, field, value)
        await self.db.flush()
        return tenant

    async def delete_tenant(self, business_id: UUID, tenant_id: UUID) -> None:
        """Soft delete; the unit becomes vacant when no active tenant remains."""
        tenant = await self.get_tenant(business_id, tenant_id)
        tenant.is_active = False
        await self.db.flush()

        remaining = await self.db.execute(
            select(func.count(Tenant.id)).where(
                Tenant.unit_id == tenant.unit_id,
                Tenant.is_active == True,  # noqa: E712
            )
        )
        if (remaining.scalar() or 0) == 0:
            unit = await self.db.get(Unit, tenant.unit_id)
            if unit:
                unit.occupancy_status = OccupancyStatus.VACANT
            await self.db.flush()

    async def invite_tenant_to_portal(
        self,
        business_id: UUID,
        tenant_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> Tenant:
        """Stamp the invite time and queue the invitation e-mail (once per tenant)."""
        tenant = await self.get_tenant(business_id, tenant_id)
        if not tenant.has_portal_access:
            raise InvalidStateError("Tenant does not have portal access enabled")

        tenant.portal_invite_sent_at = datetime.utcnow()
        await JobsService(self.db).enqueue_email(
            to=tenant.email,
            template="tenant_portal_invite",
            context={
                "tenant_id": str(tenant.id),
                "first_name": tenant.first_name,
            },
            unique_scope=f"tenant_portal_invite:{tenant.id}",
        )
        await AuditService(self.db).log(
            action=AuditAction.TENANT_INVITED,
            resource_type="tenant",
            resource_id=tenant.id,
            business_id=business_id,
            user_id=actor_id,
        )
        await self.db.flush()
        return tenant

    async def get_tenant_stats(self, business_id: UUID, tenant_id: UUID) -> dict:
        tenant = await self.get_tenant(business_id, tenant_id)
        payments = (
            await self.db.execute(select(RentPayment).where(RentPayment.tenant_id == tenant_id))
        ).scalars().all()
        paid = [p for p in payments if p.status == PaymentStatus.PAID]
        maintenance = await self.db.execute(
            select(func.count(MaintenanceRequest.id)).where(
                MaintenanceRequest.tenant_id == tenant_id
            )
        )
        lease = await self.db.execute(
            select(Lease.end_date)
            .where(Lease.tenant_id == tenant_id, Lease.status == LeaseStatus.ACTIVE)
            .order_by(Lease.start_date.desc())
            .limit(1)
        )
        lease_end = lease.scalar_one_or_none() or tenant.lease_end_date
        return {
            "total_payments": len(payments),
            "paid_payments": len(paid),
            "pending_payments": sum(
                1 for p in payments if p.status in (PaymentStatus.PENDING, PaymentStatus.LATE)
            ),
            "total_paid_cents": sum(p.amount_cents for p in paid),
            "maintenance_requests": maintenance.scalar() or 0,
            "lease_end_date": lease_end,
        }
