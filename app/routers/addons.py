"""Add-ons router - catalog and the current business's purchases."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import (
    AuthenticatedUser,
    require_business_admin,
    require_business_member,
)
from app.models.package import AddonProduct
from app.schemas.package import (
    AddonProductResponse,
    AddonPurchaseCreate,
    AddonPurchaseResponse,
    AddonQuantityUpdate,
)
from app.services.addon import AddonService, format_price

router = APIRouter(prefix="/addons", tags=["addons"])


def product_response(product: AddonProduct) -> AddonProductResponse:
    response = AddonProductResponse.model_validate(product)
    response.formatted_price = format_price(product.price_cents)
    return response


@router.get("/products", response_model=List[AddonProductResponse])
async def list_products(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Active add-on products."""
    products = await AddonService(db).list_products()
    return [product_response(p) for p in products]


@router.get("/purchases", response_model=List[AddonPurchaseResponse])
async def list_purchases(
    active_only: bool = True,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """The business's add-on purchases."""
    purchases = await AddonService(db).list_purchases(current_user.business_id, active_only)
    return [AddonPurchaseResponse.model_validate(p) for p in purchases]


@router.post(
    "/purchases",
    response_model=AddonPurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def purchase_addon(
    data: AddonPurchaseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Buy an add-on (admin only)."""
    purchase = await AddonService(db).purchase_addon(
        current_user.business_id, data.addon_product_id, data.quantity
    )
    await db.commit()
    await db.refresh(purchase)
    return AddonPurchaseResponse.model_validate(purchase)


@router.patch("/purchases/{purchase_id}", response_model=AddonPurchaseResponse)
async def update_addon_quantity(
    purchase_id: UUID,
    data: AddonQuantityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Change a purchase's quantity (admin only)."""
    purchase = await AddonService(db).update_addon_quantity(
        current_user.business_id, purchase_id, data.quantity
    )
    await db.commit()
    await db.refresh(purchase)
    return AddonPurchaseResponse.model_validate(purchase)


@router.post("/purchases/{purchase_id}/cancel", response_model=AddonPurchaseResponse)
async def cancel_addon(
    purchase_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Cancel an add-on (admin only)."""
    purchase = await AddonService(db).cancel_addon(current_user.business_id, purchase_id)
    await db.commit()
    await db.refresh(purchase)
    return AddonPurchaseResponse.model_validate(purchase)
