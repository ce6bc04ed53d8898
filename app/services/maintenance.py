"""Maintenance request service."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError, NotFoundError
from app.models.enums import MaintenanceStatus
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.services.unit import UnitService


class MaintenanceService:
    """Business-scoped maintenance requests."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _scoped(self, business_id: UUID):
        return (
            select(MaintenanceRequest)
            .join(Unit, MaintenanceRequest.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .where(Property.business_id == business_id)
        )

    async def get_request(self, business_id: UUID, request_id: UUID) -> MaintenanceRequest:
        result = await self.db.execute(
            self._scoped(business_id).where(MaintenanceRequest.id == request_id)
        )
        request = result.scalar_one_or_none()
        if not request:
            raise NotFoundError("Maintenance request")
        return request

    async def list_requests(
        self,
        business_id: UUID,
        status: Optional[MaintenanceStatus] = None,
        unit_id: Optional[UUID] = None,
    ) -> list[MaintenanceRequest]:
        query = self._scoped(business_id)
        if status:
            query = query.where(MaintenanceRequest.status == status)
        if unit_id:
            query = query.where(MaintenanceRequest.unit_id == unit_id)
        result = await self.db.execute(query.order_by(MaintenanceRequest.created_at.desc()))
        return list(result.scalars().all())

    async def create_request(
        self,
        business_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> MaintenanceRequest:
        await UnitService(self.db).get_unit(business_id, data["unit_id"])
        request = MaintenanceRequest(
            status=MaintenanceStatus.OPEN,
            created_by_id=created_by_id,
            **data,
        )
        self.db.add(request)
        await self.db.flush()
        return request

    async def update_request(
        self, business_id: UUID, request_id: UUID, data: dict[str, Any]
    ) -> MaintenanceRequest:
        request = await self.get_request(business_id, request_id)
        for field, value in data.items():
            setattr(request, field, value)
        if request.status == MaintenanceStatus.COMPLETED and request.completed_at is None:
            request.completed_at = datetime.utcnow()
        await self.db.flush()
        return request

    async def complete_request(
        self,
        business_id: UUID,
        request_id: UUID,
        actual_cost_cents: Optional[int] = None,
    ) -> MaintenanceRequest:
        request = await self.get_request(business_id, request_id)
        if request.status == MaintenanceStatus.CANCELLED:
            raise InvalidStateError("Cannot complete a cancelled request")
        request.status = MaintenanceStatus.COMPLETED
        request.completed_at = datetime.utcnow()
        if actual_cost_cents is not None:
            request.actual_cost_cents = actual_cost_cents
        await self.db.flush()
        return request
