"""Super-admin affiliate program management."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_super_admin
from app.models.enums import AffiliateStatus
from app.schemas.affiliate import (
    AffiliateNotes,
    AffiliateReason,
    AffiliateReport,
    AffiliateResponse,
    AffiliateSettingsResponse,
    AffiliateSettingsUpdate,
    CommissionRecord,
    CommissionResponse,
    MonthlyCommissionSummary,
    PayoutComplete,
    PayoutFail,
    PayoutResponse,
)
from app.services.affiliate import AffiliateService
from app.services.affiliate_admin import AffiliateAdminService

router = APIRouter(prefix="/super-admin/affiliates", tags=["super-admin"])


# === Settings ===

@router.get("/settings", response_model=AffiliateSettingsResponse)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    settings = await AffiliateAdminService(db).get_settings()
    await db.commit()
    return AffiliateSettingsResponse.model_validate(settings)


@router.put("/settings", response_model=AffiliateSettingsResponse)
async def update_settings(
    data: AffiliateSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    settings = await AffiliateAdminService(db).update_settings(
        data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(settings)
    return AffiliateSettingsResponse.model_validate(settings)


# === Affiliates ===

@router.get("", response_model=List[AffiliateResponse])
async def list_affiliates(
    status_filter: Optional[AffiliateStatus] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliates = await AffiliateAdminService(db).list_affiliates(
        status=status_filter, search=search, limit=limit, offset=offset
    )
    return [AffiliateResponse.model_validate(a) for a in affiliates]


@router.get("/pending", response_model=List[AffiliateResponse])
async def list_pending_applications(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliates = await AffiliateAdminService(db).get_pending_applications()
    return [AffiliateResponse.model_validate(a) for a in affiliates]


@router.get("/report", response_model=AffiliateReport)
async def get_report(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Program-wide affiliate, referral and payout totals."""
    return AffiliateReport(**await AffiliateAdminService(db).get_report())


@router.get("/commissions", response_model=List[CommissionResponse])
async def get_commission_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    commissions = await AffiliateAdminService(db).get_commission_report(start_date, end_date)
    return [CommissionResponse.model_validate(c) for c in commissions]


@router.get("/commissions/monthly", response_model=List[MonthlyCommissionSummary])
async def get_monthly_commissions(
    months: int = Query(default=12, ge=1, le=36),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    summary = await AffiliateAdminService(db).get_monthly_commission_summary(months)
    return [MonthlyCommissionSummary(**row) for row in summary]


@router.post("/commissions", response_model=Optional[CommissionResponse])
async def record_commission(
    data: CommissionRecord,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Apply a referred business's subscription payment; null when nothing is due."""
    commission = await AffiliateService(db).record_commission(
        data.business_id, data.payment_amount_cents, data.billing_month
    )
    await db.commit()
    if commission is None:
        return None
    await db.refresh(commission)
    return CommissionResponse.model_validate(commission)


# === Payouts ===

@router.get("/payouts/pending", response_model=List[PayoutResponse])
async def list_pending_payouts(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    payouts = await AffiliateAdminService(db).get_pending_payouts()
    return [PayoutResponse.model_validate(p) for p in payouts]


@router.post("/payouts/{payout_id}/approve", response_model=PayoutResponse)
async def approve_payout(
    payout_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    payout = await AffiliateAdminService(db).approve_payout(
        payout_id, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)


@router.post("/payouts/{payout_id}/process", response_model=PayoutResponse)
async def start_processing_payout(
    payout_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    payout = await AffiliateAdminService(db).start_processing_payout(payout_id)
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)


@router.post("/payouts/{payout_id}/complete", response_model=PayoutResponse)
async def complete_payout(
    payout_id: UUID,
    data: PayoutComplete,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Record the external transfer and mark its commissions paid."""
    payout = await AffiliateAdminService(db).complete_payout(
        payout_id, data.transaction_id, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)


@router.post("/payouts/{payout_id}/fail", response_model=PayoutResponse)
async def fail_payout(
    payout_id: UUID,
    data: PayoutFail,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    payout = await AffiliateAdminService(db).fail_payout(
        payout_id, data.reason, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)


@router.post("/payouts/{payout_id}/cancel", response_model=PayoutResponse)
async def cancel_payout(
    payout_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    payout = await AffiliateAdminService(db).cancel_payout(
        payout_id, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(payout)
    return PayoutResponse.model_validate(payout)


# === Single affiliate ===

@router.get("/{affiliate_id}", response_model=AffiliateResponse)
async def get_affiliate(
    affiliate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).get_affiliate(affiliate_id)
    return AffiliateResponse.model_validate(affiliate)


@router.post("/{affiliate_id}/approve", response_model=AffiliateResponse)
async def approve_affiliate(
    affiliate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).approve_affiliate(
        affiliate_id, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.post("/{affiliate_id}/reject", response_model=AffiliateResponse)
async def reject_affiliate(
    affiliate_id: UUID,
    data: AffiliateReason,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).reject_affiliate(
        affiliate_id, data.reason, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.post("/{affiliate_id}/suspend", response_model=AffiliateResponse)
async def suspend_affiliate(
    affiliate_id: UUID,
    data: AffiliateReason,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).suspend_affiliate(
        affiliate_id, data.reason, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.post("/{affiliate_id}/reactivate", response_model=AffiliateResponse)
async def reactivate_affiliate(
    affiliate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).reactivate_affiliate(affiliate_id)
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)


@router.put("/{affiliate_id}/notes", response_model=AffiliateResponse)
async def update_notes(
    affiliate_id: UUID,
    data: AffiliateNotes,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    affiliate = await AffiliateAdminService(db).update_notes(affiliate_id, data.notes)
    await db.commit()
    await db.refresh(affiliate)
    return AffiliateResponse.model_validate(affiliate)
