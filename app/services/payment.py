"""Rent payment records."""

from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError, NotFoundError
from app.models.enums import PaymentMethod, PaymentStatus
from app.models.payment import RentPayment
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.services.tenant import TenantService


class PaymentService:
    """Business-scoped rent payments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _scoped(self, business_id: UUID):
        return (
            select(RentPayment)
            .join(Tenant, RentPayment.tenant_id == Tenant.id)
            .join(Unit, Tenant.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .where(Property.business_id == business_id)
        )

    async def get_payment(self, business_id: UUID, payment_id: UUID) -> RentPayment:
        result = await self.db.execute(
            self._scoped(business_id).where(RentPayment.id == payment_id)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFoundError("Payment")
        return payment

    async def list_payments(
        self,
        business_id: UUID,
        tenant_id: Optional[UUID] = None,
        status: Optional[PaymentStatus] = None,
    ) -> list[RentPayment]:
        query = self._scoped(business_id)
        if tenant_id:
            query = query.where(RentPayment.tenant_id == tenant_id)
        if status:
            query = query.where(RentPayment.status == status)
        result = await self.db.execute(
            query.order_by(RentPayment.due_date.desc(), RentPayment.created_at.desc())
        )
        return list(result.scalars().all())

    async def record_payment(self, business_id: UUID, data: dict[str, Any]) -> RentPayment:
        await TenantService(self.db).get_tenant(business_id, data["tenant_id"])
        payment = RentPayment(**data)
        self.db.add(payment)
        await self.db.flush()
        return payment

    async def mark_paid(
        self,
        business_id: UUID,
        payment_id: UUID,
        paid_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None,
    ) -> RentPayment:
        payment = await self.get_payment(business_id, payment_id)
        if payment.status in (PaymentStatus.PAID, PaymentStatus.REFUNDED):
            raise InvalidStateError(f"Payment is already {payment.status.value}")
        payment.status = PaymentStatus.PAID
        payment.paid_date = paid_date or date.today()
        if payment_method:
            payment.payment_method = payment_method
        await self.db.flush()
        return payment
