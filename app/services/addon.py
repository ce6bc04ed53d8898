"""Add-on products and business purchases."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.core.money import format_cents
from app.models.enums import AddonPurchaseStatus, BillingCycle
from app.models.package import AddonProduct, AddonPurchase


def format_price(cents: int) -> str:
    """``$x.xx`` display string."""
    return format_cents(cents)


def next_billing_date(start: date, cycle: BillingCycle = BillingCycle.MONTHLY) -> date:
    if cycle == BillingCycle.ANNUAL:
        return start + relativedelta(years=1)
    return start + relativedelta(months=1)


class AddonService:
    """Add-on catalog (super-admin) and purchases (business)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_products(self, include_inactive: bool = False) -> list[AddonProduct]:
        query = select(AddonProduct)
        if not include_inactive:
            query = query.where(AddonProduct.is_active == True)  # noqa: E712
        result = await self.db.execute(query.order_by(AddonProduct.addon_type, AddonProduct.price_cents))
        return list(result.scalars().all())

    async def get_product(self, product_id: UUID) -> AddonProduct:
        product = await self.db.get(AddonProduct, product_id)
        if not product:
            raise NotFoundError("Add-on product")
        return product

    async def create_product(self, data: dict[str, Any]) -> AddonProduct:
        product = AddonProduct(**data)
        self.db.add(product)
        await self.db.flush()
        return product

    async def update_product(self, product_id: UUID, data: dict[str, Any]) -> AddonProduct:
        product = await self.get_product(product_id)
        for field, value in data.items():
            setattr(product, field, value)
        await self.db.flush()
        return product

    async def list_purchases(
        self, business_id: UUID, active_only: bool = True
    ) -> list[AddonPurchase]:
        query = select(AddonPurchase).where(AddonPurchase.business_id == business_id)
        if active_only:
            query = query.where(AddonPurchase.status == AddonPurchaseStatus.ACTIVE)
        result = await self.db.execute(query.order_by(AddonPurchase.purchased_at.desc()))
        return list(result.scalars().all())

    async def get_purchase(self, business_id: UUID, purchase_id: UUID) -> AddonPurchase:
        result = await self.db.execute(
            select(AddonPurchase).where(
                AddonPurchase.id == purchase_id,
                AddonPurchase.business_id == business_id,
            )
        )
        purchase = result.scalar_one_or_none()
        if not purchase:
            raise NotFoundError("Add-on purchase")
        return purchase

    async def purchase_addon(
        self, business_id: UUID, product_id: UUID, quantity: int = 1
    ) -> AddonPurchase:
        if quantity <= 0:
            raise DomainError("Quantity must be greater than 0")
        product = await self.get_product(product_id)
        if not product.is_active:
            raise InvalidStateError("Add-on product is not available")

        now = datetime.utcnow()
        purchase = AddonPurchase(
            business_id=business_id,
            addon_product_id=product.id,
            quantity=quantity,
            status=AddonPurchaseStatus.ACTIVE,
            purchased_at=now,
            next_billing_date=next_billing_date(now.date()),
        )
        self.db.add(purchase)
        await self.db.flush()
        return purchase

    async def cancel_addon(self, business_id: UUID, purchase_id: UUID) -> AddonPurchase:
        purchase = await self.get_purchase(business_id, purchase_id)
        if purchase.status == AddonPurchaseStatus.CANCELLED:
            raise InvalidStateError("Add-on is already cancelled")
        purchase.status = AddonPurchaseStatus.CANCELLED
        purchase.cancelled_at = datetime.utcnow()
        await self.db.flush()
        return purchase

    async def update_addon_quantity(
        self, business_id: UUID, purchase_id: UUID, quantity: int
    ) -> AddonPurchase:
        if quantity <= 0:
            raise DomainError("Quantity must be greater than 0")
        purchase = await self.get_purchase(business_id, purchase_id)
        if purchase.status != AddonPurchaseStatus.ACTIVE:
            raise InvalidStateError("Only active add-ons can be changed")
        purchase.quantity = quantity
        await self.db.flush()
        return purchase
