"""Affiliate-side program operations: applications, referral tracking, payouts."""

import logging
import secrets
from datetime import date, datetime, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.core.money import round_half_up
from app.models.affiliate import (
    Affiliate,
    AffiliateCommission,
    AffiliatePayout,
    AffiliateReferral,
)
from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliateCommissionType,
    AffiliatePayoutStatus,
    AffiliateStatus,
    AuditAction,
)
from app.services.affiliate_admin import FAILABLE_PAYOUT_STATUSES, AffiliateAdminService
from app.services.audit import AuditService

logger = logging.getLogger(__name__)

# No 0/O or 1/I
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8


def generate_referral_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def commission_for(amount_cents: int, percentage_bp: int) -> int:
    """Commission on a payment; the percentage is in basis points, truncated."""
    return amount_cents * percentage_bp // 10000


class AffiliateService:
    """Operations an affiliate (or the signup flow) performs."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.admin = AffiliateAdminService(db)
        self.audit = AuditService(db)

    # === Account ===

    async def get_by_user(self, user_id: UUID) -> Optional[Affiliate]:
        result = await self.db.execute(select(Affiliate).where(Affiliate.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_my_affiliate(self, user_id: UUID) -> Affiliate:
        affiliate = await self.get_by_user(user_id)
        if not affiliate:
            raise NotFoundError("Affiliate")
        return affiliate

    async def _unused_code(self) -> str:
        while True:
            code = generate_referral_code()
            taken = await self.db.execute(
                select(Affiliate.id).where(Affiliate.referral_code == code)
            )
            if taken.scalar_one_or_none() is None:
                return code

    async def apply(self, user_id: UUID, data: dict[str, Any]) -> Affiliate:
        """Create the caller's affiliate account.

        Pending until a super admin approves it, unless the program does not
        require approval.
        """
        settings = await self.admin.get_settings()
        if not settings.program_active:
            raise InvalidStateError("The affiliate program is not accepting applications")
        if await self.get_by_user(user_id):
            raise DomainError("You already have an affiliate account")

        affiliate = Affiliate(
            user_id=user_id,
            referral_code=await self._unused_code(),
            status=(
                AffiliateStatus.PENDING if settings.require_approval
                else AffiliateStatus.APPROVED
            ),
            **data,
        )
        if affiliate.status == AffiliateStatus.APPROVED:
            affiliate.approved_at = datetime.utcnow()
        self.db.add(affiliate)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.AFFILIATE_APPLIED,
            resource_type="affiliate",
            resource_id=affiliate.id,
            user_id=user_id,
        )
        logger.info(f"[AFFILIATE] {affiliate.referral_code} applied ({affiliate.status.value})")
        return affiliate

    async def update_profile(self, user_id: UUID, data: dict[str, Any]) -> Affiliate:
        affiliate = await self.get_my_affiliate(user_id)
        for field, value in data.items():
            setattr(affiliate, field, value)
        await self.db.flush()
        return affiliate

    # === Referral tracking ===

    async def _approved_by_code(self, code: str) -> Optional[Affiliate]:
        result = await self.db.execute(
            select(Affiliate).where(
                Affiliate.referral_code == code.upper(),
                Affiliate.status == AffiliateStatus.APPROVED,
            )
        )
        return result.scalar_one_or_none()

    async def validate_code(self, code: str) -> dict[str, Any]:
        result = await self.db.execute(
            select(Affiliate).where(Affiliate.referral_code == code.upper())
        )
        affiliate = result.scalar_one_or_none()
        if affiliate is None:
            return {"is_valid": False, "affiliate_id": None}
        return {
            "is_valid": affiliate.status == AffiliateStatus.APPROVED,
            "affiliate_id": affiliate.id,
        }

    async def track_click(self, code: str, landing_page: Optional[str] = None) -> Optional[str]:
        """Record a visit through a referral link.

        Returns the click id used for attribution, or None when the code does
        not belong to an approved affiliate.
        """
        affiliate = await self._approved_by_code(code)
        if affiliate is None:
            return None

        settings = await self.admin.get_settings()
        click_id = secrets.token_hex(16)
        self.db.add(
            AffiliateReferral(
                affiliate_id=affiliate.id,
                click_id=click_id,
                landing_page=landing_page,
                attribution_expires_at=(
                    datetime.utcnow() + timedelta(days=settings.attribution_window_days)
                ),
            )
        )
        affiliate.total_clicks = (affiliate.total_clicks or 0) + 1
        await self.db.flush()
        return click_id

    async def track_signup(self, click_id: str, user_id: UUID, business_id: UUID) -> bool:
        """Attribute a new business to the click that brought its owner in."""
        result = await self.db.execute(
            select(AffiliateReferral).where(
                AffiliateReferral.click_id == click_id,
                AffiliateReferral.attribution_expires_at > datetime.utcnow(),
                AffiliateReferral.referred_user_id.is_(None),
            )
        )
        referral = result.scalar_one_or_none()
        if referral is None:
            return False

        affiliate = await self.admin.get_affiliate(referral.affiliate_id)
        settings = await self.admin.get_settings()
        if affiliate.user_id == user_id and not settings.allow_self_referral:
            logger.warning(f"[AFFILIATE] Self-referral ignored for {affiliate.referral_code}")
            return False

        referral.referred_user_id = user_id
        referral.referred_business_id = business_id
        referral.signup_at = datetime.utcnow()
        affiliate.total_signups = (affiliate.total_signups or 0) + 1
        await self.db.flush()
        return True

    async def record_commission(
        self,
        business_id: UUID,
        payment_amount_cents: int,
        billing_month: Optional[date] = None,
    ) -> Optional[AffiliateCommission]:
        """Earn commission on a referred business's subscription payment.

        The first payment converts the referral. Returns None when no
        commission is due.
        """
        settings = await self.admin.get_settings()
        if not settings.program_active:
            return None

        result = await self.db.execute(
            select(AffiliateReferral).where(
                AffiliateReferral.referred_business_id == business_id,
                AffiliateReferral.signup_at.is_not(None),
            )
        )
        referral = result.scalar_one_or_none()
        if referral is None:
            return None

        affiliate = await self.admin.get_affiliate(referral.affiliate_id)
        was_converted = referral.converted
        if not was_converted:
            referral.converted = True
            referral.first_payment_at = datetime.utcnow()
            referral.first_payment_amount_cents = payment_amount_cents
            affiliate.total_paid_signups = (affiliate.total_paid_signups or 0) + 1
            await self.db.flush()

        if affiliate.status != AffiliateStatus.APPROVED:
            return None
        if settings.commission_type == AffiliateCommissionType.ONE_TIME and was_converted:
            return None

        month = (billing_month or date.today()).replace(day=1)
        earned = await self.db.execute(
            select(AffiliateCommission.billing_month).where(
                AffiliateCommission.referral_id == referral.id
            )
        )
        earned_months = list(earned.scalars().all())
        if month in earned_months:
            return None
        if settings.recurring_months is not None and len(earned_months) >= settings.recurring_months:
            return None

        amount = commission_for(payment_amount_cents, settings.commission_percentage)
        commission = AffiliateCommission(
            affiliate_id=affiliate.id,
            referral_id=referral.id,
            billing_month=month,
            subscription_amount_cents=payment_amount_cents,
            commission_percentage=settings.commission_percentage,
            commission_amount_cents=amount,
            status=AffiliateCommissionStatus.EARNED,
        )
        self.db.add(commission)
        affiliate.total_commission_earned_cents = (
            (affiliate.total_commission_earned_cents or 0) + amount
        )
        affiliate.pending_commission_cents = (affiliate.pending_commission_cents or 0) + amount
        await self.db.flush()
        return commission

    # === Payouts ===

    async def request_payout(self, user_id: UUID) -> AffiliatePayout:
        """Bundle every earned commission into one pending payout."""
        result = await self.db.execute(
            select(Affiliate).where(Affiliate.user_id == user_id).with_for_update()
        )
        affiliate = result.scalar_one_or_none()
        if not affiliate:
            raise NotFoundError("Affiliate")
        if affiliate.status != AffiliateStatus.APPROVED:
            raise InvalidStateError("Only approved affiliates can request payouts")

        open_payout = await self.db.execute(
            select(AffiliatePayout.id).where(
                AffiliatePayout.affiliate_id == affiliate.id,
                AffiliatePayout.status.in_(FAILABLE_PAYOUT_STATUSES),
            )
        )
        if open_payout.first() is not None:
            raise InvalidStateError("A payout request is already pending")

        settings = await self.admin.get_settings()
        if (affiliate.pending_commission_cents or 0) < settings.minimum_payout_cents:
            raise DomainError("Balance below minimum payout threshold")

        earned = await self.db.execute(
            select(AffiliateCommission).where(
                AffiliateCommission.affiliate_id == affiliate.id,
                AffiliateCommission.status == AffiliateCommissionStatus.EARNED,
            )
        )
        commissions = list(earned.scalars().all())
        total = sum(c.commission_amount_cents for c in commissions)
        if total <= 0:
            raise DomainError("No commissions available for payout")
        if affiliate.payout_method is None:
            raise DomainError("Set a payout method before requesting a payout")

        payout = AffiliatePayout(
            affiliate_id=affiliate.id,
            amount_cents=total,
            commission_count=len(commissions),
            period_start=min(c.created_at for c in commissions).date(),
            period_end=date.today(),
            status=AffiliatePayoutStatus.PENDING,
            payout_method=affiliate.payout_method.value,
            requested_at=datetime.utcnow(),
        )
        self.db.add(payout)
        await self.db.flush()

        for commission in commissions:
            commission.status = AffiliateCommissionStatus.PENDING_PAYOUT
            commission.payout_id = payout.id
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.PAYOUT_REQUESTED,
            resource_type="affiliate_payout",
            resource_id=payout.id,
            user_id=user_id,
            details={"amount_cents": total, "commission_count": len(commissions)},
        )
        logger.info(f"[AFFILIATE] Payout {payout.id} requested by {affiliate.referral_code}")
        return payout

    # === History ===

    async def list_referrals(self, affiliate_id: UUID, limit: int = 50) -> list[AffiliateReferral]:
        result = await self.db.execute(
            select(AffiliateReferral)
            .where(AffiliateReferral.affiliate_id == affiliate_id)
            .order_by(AffiliateReferral.clicked_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_commissions(
        self,
        affiliate_id: UUID,
        status: Optional[AffiliateCommissionStatus] = None,
        limit: int = 50,
    ) -> list[AffiliateCommission]:
        query = select(AffiliateCommission).where(AffiliateCommission.affiliate_id == affiliate_id)
        if status:
            query = query.where(AffiliateCommission.status == status)
        result = await self.db.execute(
            query.order_by(AffiliateCommission.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def list_payouts(self, affiliate_id: UUID) -> list[AffiliatePayout]:
        result = await self.db.execute(
            select(AffiliatePayout)
            .where(AffiliatePayout.affiliate_id == affiliate_id)
            .order_by(AffiliatePayout.requested_at.desc())
        )
        return list(result.scalars().all())

    async def get_stats(self, affiliate: Affiliate) -> dict[str, Any]:
        month_start = datetime.combine(date.today().replace(day=1), datetime.min.time())
        clicks = await self.db.execute(
            select(func.count(AffiliateReferral.id)).where(
                AffiliateReferral.affiliate_id == affiliate.id,
                AffiliateReferral.clicked_at >= month_start,
            )
        )
        signups = await self.db.execute(
            select(func.count(AffiliateReferral.id)).where(
                AffiliateReferral.affiliate_id == affiliate.id,
                AffiliateReferral.signup_at >= month_start,
            )
        )
        month_commission = await self.db.execute(
            select(func.coalesce(func.sum(AffiliateCommission.commission_amount_cents), 0)).where(
                AffiliateCommission.affiliate_id == affiliate.id,
                AffiliateCommission.created_at >= month_start,
            )
        )
        total_clicks = affiliate.total_clicks or 0
        conversion_rate = (
            round_half_up((affiliate.total_paid_signups or 0) / total_clicks * 100, 2)
            if total_clicks else 0
        )
        return {
            "total_clicks": total_clicks,
            "total_signups": affiliate.total_signups or 0,
            "total_paid_signups": affiliate.total_paid_signups or 0,
            "conversion_rate": conversion_rate,
            "total_commission_earned_cents": affiliate.total_commission_earned_cents or 0,
            "total_commission_paid_cents": affiliate.total_commission_paid_cents or 0,
            "pending_commission_cents": affiliate.pending_commission_cents or 0,
            "this_month_clicks": clicks.scalar() or 0,
            "this_month_signups": signups.scalar() or 0,
            "this_month_commission_cents": int(month_commission.scalar() or 0),
        }
