"""Affiliate program administration: partners, payouts and reports."""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError, NotFoundError
from app.core.money import format_cents
from app.models.affiliate import (
    Affiliate,
    AffiliateCommission,
    AffiliatePayout,
    AffiliateReferral,
    AffiliateSettings,
)
from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliatePayoutStatus,
    AffiliateStatus,
    AuditAction,
)
from app.models.user import User
from app.services.audit import AuditService
from app.services.jobs import JobsService

logger = logging.getLogger(__name__)

PENDING_PAYOUT_STATUSES = (AffiliatePayoutStatus.PENDING, AffiliatePayoutStatus.APPROVED)
FAILABLE_PAYOUT_STATUSES = PENDING_PAYOUT_STATUSES + (AffiliatePayoutStatus.PROCESSING,)


def format_currency(cents: int) -> str:
    """Display amount in Canadian dollars (``$1,234.50``)."""
    return format_cents(cents)


class AffiliateAdminService:
    """Super-admin operations over the affiliate program."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jobs = JobsService(db)
        self.audit = AuditService(db)

    # === Settings ===

    async def get_settings(self) -> AffiliateSettings:
        """The program settings row, created with defaults on first use."""
        result = await self.db.execute(select(AffiliateSettings).limit(1))
        settings = result.scalar_one_or_none()
        if settings is None:
            settings = AffiliateSettings()
            self.db.add(settings)
            await self.db.flush()
        return settings

    async def update_settings(self, data: dict[str, Any]) -> AffiliateSettings:
        settings = await self.get_settings()
        for field, value in data.items():
            setattr(settings, field, value)
        await self.db.flush()
        return settings

    # === Affiliates ===

    async def list_affiliates(
        self,
        status: Optional[AffiliateStatus] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Affiliate]:
        query = select(Affiliate)
        if status:
            query = query.where(Affiliate.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Affiliate.referral_code.ilike(pattern),
                    Affiliate.company_name.ilike(pattern),
                    Affiliate.payout_email.ilike(pattern),
                )
            )
        result = await self.db.execute(
            query.order_by(Affiliate.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def get_pending_applications(self) -> list[Affiliate]:
        result = await self.db.execute(
            select(Affiliate)
            .where(Affiliate.status == AffiliateStatus.PENDING)
            .order_by(Affiliate.created_at)
        )
        return list(result.scalars().all())

    async def get_affiliate(self, affiliate_id: UUID) -> Affiliate:
        result = await self.db.execute(select(Affiliate).where(Affiliate.id == affiliate_id))
        affiliate = result.scalar_one_or_none()
        if not affiliate:
            raise NotFoundError("Affiliate")
        return affiliate

    async def _affiliate_email(self, affiliate: Affiliate) -> Optional[str]:
        if affiliate.payout_email:
            return affiliate.payout_email
        result = await self.db.execute(select(User.email).where(User.id == affiliate.user_id))
        return result.scalar_one_or_none()

    async def _notify(self, affiliate: Affiliate, template: str, scope: str, **context: Any) -> None:
        email = await self._affiliate_email(affiliate)
        if not email:
            logger.warning(f"No e-mail address for affiliate {affiliate.id}; skipping {template}")
            return
        await self.jobs.enqueue_email(
            to=email,
            template=template,
            context={"referral_code": affiliate.referral_code, **context},
            unique_scope=scope,
        )

    async def approve_affiliate(self, affiliate_id: UUID, admin_id: UUID) -> Affiliate:
        affiliate = await self.get_affiliate(affiliate_id)
        affiliate.status = AffiliateStatus.APPROVED
        affiliate.approved_at = datetime.utcnow()
        affiliate.approved_by_id = admin_id
        affiliate.rejection_reason = None
        await self.db.flush()

        await self._notify(
            affiliate, "affiliate_approved", f"affiliate_approved:{affiliate.id}"
        )
        await self.audit.log(
            action=AuditAction.AFFILIATE_APPROVED,
            resource_type="affiliate",
            resource_id=affiliate.id,
            user_id=admin_id,
        )
        return affiliate

    async def reject_affiliate(
        self, affiliate_id: UUID, reason: str, admin_id: Optional[UUID] = None
    ) -> Affiliate:
        affiliate = await self.get_affiliate(affiliate_id)
        affiliate.status = AffiliateStatus.REJECTED
        affiliate.rejection_reason = reason
        await self.db.flush()

        await self._notify(
            affiliate,
            "affiliate_rejected",
            f"affiliate_rejected:{affiliate.id}",
            reason=reason,
        )
        await self.audit.log(
            action=AuditAction.AFFILIATE_REJECTED,
            resource_type="affiliate",
            resource_id=affiliate.id,
            user_id=admin_id,
            details={"reason": reason},
        )
        return affiliate

    async def suspend_affiliate(
        self, affiliate_id: UUID, reason: str, admin_id: Optional[UUID] = None
    ) -> Affiliate:
        affiliate = await self.get_affiliate(affiliate_id)
        affiliate.status = AffiliateStatus.SUSPENDED
        affiliate.suspension_reason = reason
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.AFFILIATE_SUSPENDED,
            resource_type="affiliate",
            resource_id=affiliate.id,
            user_id=admin_id,
            details={"reason": reason},
        )
        return affiliate

    async def reactivate_affiliate(self, affiliate_id: UUID) -> Affiliate:
        affiliate = await self.get_affiliate(affiliate_id)
        affiliate.status = AffiliateStatus.APPROVED
        affiliate.suspension_reason = None
        await self.db.flush()
        return affiliate

    async def update_notes(self, affiliate_id: UUID, notes: Optional[str]) -> Affiliate:
        affiliate = await self.get_affiliate(affiliate_id)
        affiliate.notes = notes
        await self.db.flush()
        return affiliate

    # === Payouts ===

    async def get_pending_payouts(self) -> list[AffiliatePayout]:
        result = await self.db.execute(
            select(AffiliatePayout)
            .where(AffiliatePayout.status.in_(PENDING_PAYOUT_STATUSES))
            .order_by(AffiliatePayout.requested_at)
        )
        return list(result.scalars().all())

    async def get_payout(self, payout_id: UUID) -> AffiliatePayout:
        result = await self.db.execute(
            select(AffiliatePayout).where(AffiliatePayout.id == payout_id)
        )
        payout = result.scalar_one_or_none()
        if not payout:
            raise NotFoundError("Payout")
        return payout

    async def _payout_commissions(self, payout_id: UUID) -> list[AffiliateCommission]:
        result = await self.db.execute(
            select(AffiliateCommission).where(AffiliateCommission.payout_id == payout_id)
        )
        return list(result.scalars().all())

    async def _release_commissions(self, payout_id: UUID) -> None:
        """Return a payout's commissions to earned and unlink them."""
        for commission in await self._payout_commissions(payout_id):
            commission.status = AffiliateCommissionStatus.EARNED
            commission.payout_id = None

    async def approve_payout(self, payout_id: UUID, admin_id: UUID) -> AffiliatePayout:
        payout = await self.get_payout(payout_id)
        if payout.status != AffiliatePayoutStatus.PENDING:
            raise InvalidStateError(
                f"Payout cannot be approved - invalid status: {payout.status.value}"
            )
        payout.status = AffiliatePayoutStatus.APPROVED
        payout.approved_at = datetime.utcnow()
        payout.approved_by_id = admin_id
        await self.db.flush()
        return payout

    async def start_processing_payout(self, payout_id: UUID) -> AffiliatePayout:
        payout = await self.get_payout(payout_id)
        if payout.status != AffiliatePayoutStatus.APPROVED:
            raise InvalidStateError(
                f"Payout cannot be processed - invalid status: {payout.status.value}"
            )
        payout.status = AffiliatePayoutStatus.PROCESSING
        await self.db.flush()
        return payout

    async def complete_payout(
        self,
        payout_id: UUID,
        transaction_id: str,
        admin_id: Optional[UUID] = None,
    ) -> AffiliatePayout:
        """Settle a payout and its commissions in one transaction."""
        payout = await self.get_payout(payout_id)
        if payout.status not in FAILABLE_PAYOUT_STATUSES:
            raise InvalidStateError(
                f"Payout cannot be completed - invalid status: {payout.status.value}"
            )

        payout.status = AffiliatePayoutStatus.COMPLETED
        payout.transaction_id = transaction_id
        payout.processed_at = datetime.utcnow()

        for commission in await self._payout_commissions(payout.id):
            commission.status = AffiliateCommissionStatus.PAID

        affiliate = await self.get_affiliate(payout.affiliate_id)
        affiliate.total_commission_paid_cents = (
            (affiliate.total_commission_paid_cents or 0) + payout.amount_cents
        )
        affiliate.pending_commission_cents = max(
            0, (affiliate.pending_commission_cents or 0) - payout.amount_cents
        )
        await self.db.flush()

        await self._notify(
            affiliate,
            "affiliate_payout_completed",
            f"payout_completed:{payout.id}",
            amount=format_currency(payout.amount_cents),
            transaction_id=transaction_id,
        )
        await self.audit.log(
            action=AuditAction.PAYOUT_COMPLETED,
            resource_type="affiliate_payout",
            resource_id=payout.id,
            user_id=admin_id,
            details={"amount_cents": payout.amount_cents, "transaction_id": transaction_id},
        )
        logger.info(f"Payout {payout.id} completed: {format_currency(payout.amount_cents)}")
        return payout

    async def fail_payout(
        self,
        payout_id: UUID,
        reason: str,
        admin_id: Optional[UUID] = None,
    ) -> AffiliatePayout:
        payout = await self.get_payout(payout_id)
        if payout.status not in FAILABLE_PAYOUT_STATUSES:
            raise InvalidStateError(
                f"Payout cannot be failed - invalid status: {payout.status.value}"
            )

        payout.status = AffiliatePayoutStatus.FAILED
        payout.failure_reason = reason
        payout.processed_at = datetime.utcnow()
        await self._release_commissions(payout.id)
        await self.db.flush()

        affiliate = await self.get_affiliate(payout.affiliate_id)
        await self._notify(
            affiliate,
            "affiliate_payout_failed",
            f"payout_failed:{payout.id}",
            amount=format_currency(payout.amount_cents),
            reason=reason,
        )
        await self.audit.log(
            action=AuditAction.PAYOUT_FAILED,
            resource_type="affiliate_payout",
            resource_id=payout.id,
            user_id=admin_id,
            details={"reason": reason},
        )
        logger.warning(f"Payout {payout.id} failed: {reason}")
        return payout

    async def cancel_payout(
        self, payout_id: UUID, admin_id: Optional[UUID] = None
    ) -> AffiliatePayout:
        payout = await self.get_payout(payout_id)
        if payout.status not in PENDING_PAYOUT_STATUSES:
            raise InvalidStateError(
                f"Payout cannot be cancelled - invalid status: {payout.status.value}"
            )

        payout.status = AffiliatePayoutStatus.CANCELLED
        await self._release_commissions(payout.id)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.PAYOUT_CANCELLED,
            resource_type="affiliate_payout",
            resource_id=payout.id,
            user_id=admin_id,
        )
        return payout

    # === Reports ===

    async def _count(self, query) -> int:
        result = await self.db.execute(query)
        return result.scalar_one() or 0

    async def get_report(self) -> dict[str, int]:
        """Program-wide totals."""
        pending_payouts = await self.db.execute(
            select(
                func.coalesce(func.sum(AffiliatePayout.amount_cents), 0),
                func.count(AffiliatePayout.id),
            ).where(AffiliatePayout.status.in_(PENDING_PAYOUT_STATUSES))
        )
        pending_cents, pending_count = pending_payouts.one()

        return {
            "total_affiliates": await self._count(select(func.count(Affiliate.id))),
            "active_affiliates": await self._count(
                select(func.count(Affiliate.id)).where(
                    Affiliate.status == AffiliateStatus.APPROVED
                )
            ),
            "pending_applications": await self._count(
                select(func.count(Affiliate.id)).where(
                    Affiliate.status == AffiliateStatus.PENDING
                )
            ),
            "total_referrals": await self._count(select(func.count(AffiliateReferral.id))),
            "total_conversions": await self._count(
                select(func.count(AffiliateReferral.id)).where(
                    AffiliateReferral.converted == True  # noqa: E712
                )
            ),
            "total_commission_earned_cents": await self._count(
                select(func.coalesce(func.sum(Affiliate.total_commission_earned_cents), 0))
            ),
            "total_commission_paid_cents": await self._count(
                select(func.coalesce(func.sum(Affiliate.total_commission_paid_cents), 0))
            ),
            "pending_payouts_cents": int(pending_cents),
            "pending_payouts_count": int(pending_count),
        }

    async def get_commission_report(
        self, start_date: date, end_date: date
    ) -> list[AffiliateCommission]:
        result = await self.db.execute(
            select(AffiliateCommission)
            .where(
                AffiliateCommission.billing_month >= start_date,
                AffiliateCommission.billing_month <= end_date,
            )
            .order_by(AffiliateCommission.billing_month.desc())
        )
        return list(result.scalars().all())

    async def get_monthly_commission_summary(self, months: int = 12) -> list[dict[str, Any]]:
        """Commission totals per billing month over the last ``months`` months."""
        today = date.today()
        start = today.replace(day=1) - relativedelta(months=months - 1)
        commissions = await self.get_commission_report(start, today)

        buckets: dict[date, dict[str, Any]] = defaultdict(
            lambda: {"commission_count": 0, "total_commission_cents": 0, "paid_commission_cents": 0}
        )
        for commission in commissions:
            month = commission.billing_month.replace(day=1)
            bucket = buckets[month]
            bucket["commission_count"] += 1
            bucket["total_commission_cents"] += commission.commission_amount_cents
            if commission.status == AffiliateCommissionStatus.PAID:
                bucket["paid_commission_cents"] += commission.commission_amount_cents

        return [
            {"billing_month": month, **totals}
            for month, totals in sorted(buckets.items())
        ]
