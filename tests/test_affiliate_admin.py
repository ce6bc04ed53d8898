"""Affiliate approval, payout lifecycle and commission reporting."""

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import select

from app.core.errors import InvalidStateError
from app.models.affiliate import (
    Affiliate,
    AffiliateCommission,
    AffiliatePayout,
    AffiliateReferral,
)
from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliatePayoutStatus,
    AffiliateStatus,
)
from app.models.jobs import JobsOutbox
from app.models.user import User
from app.services.affiliate_admin import AffiliateAdminService, format_currency


@pytest.fixture
async def affiliate(db):
    partner = User(firebase_uid="partner-uid", email="partner@example.com")
    db.add(partner)
    await db.flush()
    affiliate = Affiliate(
        user_id=partner.id,
        referral_code="MAPLE20",
        company_name="Maple Referrals",
        payout_email="payouts@maple.example",
        pending_commission_cents=6000,
    )
    db.add(affiliate)
    await db.commit()
    return affiliate


@pytest.fixture
async def payout(db, affiliate):
    referral = AffiliateReferral(
        affiliate_id=affiliate.id,
        click_id="click-1",
        attribution_expires_at=datetime.utcnow() + timedelta(days=30),
        converted=True,
    )
    db.add(referral)
    await db.flush()

    payout = AffiliatePayout(
        affiliate_id=affiliate.id,
        amount_cents=6000,
        commission_count=2,
        period_start=date(2026, 9, 1),
        period_end=date(2026, 9, 30),
        payout_method="paypal",
    )
    db.add(payout)
    await db.flush()

    for amount in (2500, 3500):
        db.add(
            AffiliateCommission(
                affiliate_id=affiliate.id,
                referral_id=referral.id,
                billing_month=date(2026, 9, 1),
                subscription_amount_cents=amount * 5,
                commission_percentage=2000,
                commission_amount_cents=amount,
                status=AffiliateCommissionStatus.PENDING_PAYOUT,
                payout_id=payout.id,
            )
        )
    await db.commit()
    return payout


async def _commissions(db, affiliate_id):
    result = await db.execute(
        select(AffiliateCommission).where(AffiliateCommission.affiliate_id == affiliate_id)
    )
    return list(result.scalars().all())


def test_format_currency():
    assert format_currency(123450) == "$1,234.50"
    assert format_currency(5) == "$0.05"


async def test_settings_created_with_defaults(db):
    settings = await AffiliateAdminService(db).get_settings()
    assert settings.commission_percentage == 2000
    assert settings.minimum_payout_cents == 5000
    assert settings.require_approval is True


async def test_approval_queues_one_email(db, affiliate, super_admin):
    service = AffiliateAdminService(db)
    approved = await service.approve_affiliate(affiliate.id, super_admin.id)
    await service.approve_affiliate(affiliate.id, super_admin.id)

    assert approved.status == AffiliateStatus.APPROVED
    assert approved.approved_by_id == super_admin.id
    jobs = (await db.execute(select(JobsOutbox))).scalars().all()
    assert len(jobs) == 1
    assert jobs[0].payload["to"] == "payouts@maple.example"
    assert jobs[0].payload["template"] == "affiliate_approved"


async def test_suspend_and_reactivate(db, affiliate):
    service = AffiliateAdminService(db)
    suspended = await service.suspend_affiliate(affiliate.id, "Spam traffic")
    assert suspended.status == AffiliateStatus.SUSPENDED
    assert suspended.suspension_reason == "Spam traffic"

    reactivated = await service.reactivate_affiliate(affiliate.id)
    assert reactivated.status == AffiliateStatus.APPROVED
    assert reactivated.suspension_reason is None


async def test_payout_happy_path(db, affiliate, payout, super_admin):
    service = AffiliateAdminService(db)
    await service.approve_payout(payout.id, super_admin.id)
    await service.start_processing_payout(payout.id)
    completed = await service.complete_payout(payout.id, "PP-TX-991", super_admin.id)

    assert completed.status == AffiliatePayoutStatus.COMPLETED
    assert completed.transaction_id == "PP-TX-991"
    assert completed.processed_at is not None
    assert all(c.status == AffiliateCommissionStatus.PAID for c in await _commissions(db, affiliate.id))

    await db.refresh(affiliate)
    assert affiliate.total_commission_paid_cents == 6000
    assert affiliate.pending_commission_cents == 0

    job = (await db.execute(select(JobsOutbox))).scalar_one()
    assert job.payload["context"]["amount"] == "$60.00"

    with pytest.raises(InvalidStateError, match="invalid status: completed"):
        await service.fail_payout(payout.id, "too late")


async def test_failed_payout_releases_commissions(db, affiliate, payout):
    failed = await AffiliateAdminService(db).fail_payout(payout.id, "PayPal account closed")

    assert failed.status == AffiliatePayoutStatus.FAILED
    assert failed.failure_reason == "PayPal account closed"
    for commission in await _commissions(db, affiliate.id):
        assert commission.status == AffiliateCommissionStatus.EARNED
        assert commission.payout_id is None


async def test_cancel_only_before_processing(db, payout, super_admin):
    service = AffiliateAdminService(db)
    await service.approve_payout(payout.id, super_admin.id)
    await service.start_processing_payout(payout.id)

    with pytest.raises(InvalidStateError):
        await service.cancel_payout(payout.id)
    with pytest.raises(InvalidStateError):
        await service.approve_payout(payout.id, super_admin.id)


async def test_report_and_monthly_summary(db, affiliate, payout):
    service = AffiliateAdminService(db)
    report = await service.get_report()
    assert report["total_affiliates"] == 1
    assert report["pending_applications"] == 1
    assert report["total_conversions"] == 1
    assert report["pending_payouts_cents"] == 6000
    assert report["pending_payouts_count"] == 1

    commissions = await service.get_commission_report(date(2026, 9, 1), date(2026, 9, 30))
    assert sorted(c.commission_amount_cents for c in commissions) == [2500, 3500]


async def test_payout_endpoints(client, db, auth_as, super_admin, payout):
    auth_as.update(uid="admin-uid", email="admin@rentline.app")

    response = await client.get("/v1/super-admin/affiliates/payouts/pending")
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [str(payout.id)]

    response = await client.post(f"/v1/super-admin/affiliates/payouts/{payout.id}/process")
    assert response.status_code == 400
    assert response.json() == {
        "detail": "Payout cannot be processed - invalid status: pending"
    }

    response = await client.post(f"/v1/super-admin/affiliates/payouts/{payout.id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
