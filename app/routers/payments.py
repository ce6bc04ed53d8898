"""Rent payments router, including the Square card handler."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import PaymentStatus
from app.schemas.payment import (
    PaymentCreate,
    PaymentMarkPaid,
    PaymentResponse,
    SquarePaymentRequest,
)
from app.services.payment import PaymentService
from app.services.square_payment import SquarePaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_square_service(db: AsyncSession = Depends(get_db)) -> SquarePaymentService:
    return SquarePaymentService(db)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    data: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Record a payment owed or received."""
    payment = await PaymentService(db).record_payment(current_user.business_id, data.model_dump())
    await db.commit()
    await db.refresh(payment)
    return PaymentResponse.model_validate(payment)


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    tenant_id: Optional[UUID] = None,
    status_filter: Optional[PaymentStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List payments, optionally by tenant or status."""
    payments = await PaymentService(db).list_payments(
        current_user.business_id, tenant_id=tenant_id, status=status_filter
    )
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/square")
async def charge_square(
    data: SquarePaymentRequest,
    db: AsyncSession = Depends(get_db),
    square: SquarePaymentService = Depends(get_square_service),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Charge a card through Square and record the payment."""
    status_code, body = await square.charge(
        current_user.business_id,
        data.model_dump(),
        actor_id=current_user.db_user_id,
    )
    await db.commit()
    return JSONResponse(status_code=status_code, content=body)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a payment by ID."""
    payment = await PaymentService(db).get_payment(current_user.business_id, payment_id)
    return PaymentResponse.model_validate(payment)


@router.post("/{payment_id}/mark-paid", response_model=PaymentResponse)
async def mark_paid(
    payment_id: UUID,
    data: PaymentMarkPaid,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Mark a payment as paid."""
    payment = await PaymentService(db).mark_paid(
        current_user.business_id,
        payment_id,
        paid_date=data.paid_date,
        payment_method=data.payment_method,
    )
    await db.commit()
    await db.refresh(payment)
    return PaymentResponse.model_validate(payment)
