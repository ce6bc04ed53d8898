"""Affiliate router - applications, referral links, commissions and payouts."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_registered_user
from app.models.enums import AffiliateCommissionStatus
from app.schemas.affiliate import (
    AffiliateApply,
    AffiliateProfileUpdate,
    AffiliateResponse,
    AffiliateStats,
    ClickTrack,
    ClickTracked,
    CodeValidation,
    CommissionResponse,
    PayoutResponse,
    ReferralResponse,
)
from app.services.affiliate import AffiliateService

router = APIRouter(prefix="/affiliates", tags=["affiliates"])


# === Public ===

@router.get("/codes/{code}", response_model=CodeValidation)
async def validate_code(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    """Check a referral code (no auth)."""
    return CodeValidation(**await AffiliateService(db).validate_code(code))


@router.post("/codes/{code}/clicks", response_model=ClickTracked)
async def track_click(
    code: str,
    data: ClickTrack,
    db: AsyncSession = Depends(get_db),
):
    """Record a referral-link visit (no auth)."""
    click_id = await AffiliateService(db).track_click(code, landing_page=data.landing_page)
    await db.commit()
    return ClickTracked(click_id=click_id)


# === Affiliate account ===

@router.post("/apply", response_model=AffiliateResponse, status_code=status.HTTP_201_CREATED)
async def apply(
    data: AffiliateApply,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    affiliate = await AffiliateService(db).apply(current_user.db_user_id, data.model_dump())
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.get("/me", response_model=AffiliateResponse)
async def get_my_affiliate(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    affiliate = await AffiliateService(db).get_my_affiliate(current_user.db_user_id)
    return AffiliateResponse.model_validate(affiliate)


@router.patch("/me", response_model=AffiliateResponse)
async def update_my_affiliate(
    data: AffiliateProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    affiliate = await AffiliateService(db).update_profile(
        current_user.db_user_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.get("/me/stats", response_model=AffiliateStats)
async def get_my_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    service = AffiliateService(db)
    affiliate = await service.get_my_affiliate(current_user.db_user_id)
    return AffiliateStats(**await service.get_stats(affiliate))


@router.get("/me/referrals", response_model=List[ReferralResponse])
async def list_my_referrals(
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    service = AffiliateService(db)
    affiliate = await service.get_my_affiliate(current_user.db_user_id)
    referrals = await service.list_referrals(affiliate.id, limit=limit)
    return [ReferralResponse.model_validate(r) for r in referrals]


@router.get("/me/commissions", response_model=List[CommissionResponse])
async def list_my_commissions(
    status_filter: Optional[AffiliateCommissionStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    service = AffiliateService(db)
    affiliate = await service.get_my_affiliate(current_user.db_user_id)
    commissions = await service.list_commissions(affiliate.id, status=status_filter, limit=limit)
    return [CommissionResponse.model_validate(c) for c in commissions]


@router.get("/me/payouts", response_model=List[PayoutResponse])
async def list_my_payouts(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    service = AffiliateService(db)
    affiliate = await service.get_my_affiliate(current_user.db_user_id)
    return [PayoutResponse.model_validate(p) for p in await service.list_payouts(affiliate.id)]


@router.post("/me/payouts", response_model=PayoutResponse, status_code=status.HTTP_201_CREATED)
async def request_payout(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    """Request payout of every earned commission."""
    payout = await AffiliateService(db).request_payout(current_user.db_user_id)
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)
