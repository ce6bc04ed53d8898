"""Affiliate applications, referral attribution, commissions and payout requests."""

from datetime import date, datetime, timedelta
from uuid import UUID

import pytest
from sqlalchemy import select

from app.core.errors import DomainError, InvalidStateError
from app.models.affiliate import AffiliateCommission, AffiliateReferral
from app.models.enums import (
    AffiliateCommissionStatus,
    AffiliateCommissionType,
    AffiliatePayoutMethod,
    AffiliatePayoutStatus,
    AffiliateStatus,
)
from app.models.user import User
from app.services.affiliate import AffiliateService, commission_for, generate_referral_code
from app.services.affiliate_admin import AffiliateAdminService
from app.services.business import BusinessService

APPLICATION = {
    "company_name": "Maple Referrals",
    "payout_method": AffiliatePayoutMethod.E_TRANSFER,
    "payout_email": "payouts@maple.example",
}


@pytest.fixture
async def affiliate(db, owner, super_admin):
    service = AffiliateService(db)
    affiliate = await service.apply(owner.id, APPLICATION)
    await AffiliateAdminService(db).approve_affiliate(affiliate.id, super_admin.id)
    await db.commit()
    return affiliate


@pytest.fixture
async def referred_business(db, affiliate):
    newcomer = User(firebase_uid="newcomer-uid", email="newcomer@example.com")
    db.add(newcomer)
    await db.flush()
    business = await BusinessService(db).create_business(
        newcomer.id, {"business_name": "Newcomer Rentals"}
    )
    service = AffiliateService(db)
    click_id = await service.track_click(affiliate.referral_code)
    assert await service.track_signup(click_id, newcomer.id, business.id)
    await db.commit()
    return business


def test_referral_code_shape():
    code = generate_referral_code()
    assert len(code) == 8
    assert not set(code) & set("01IO")


def test_commission_is_truncated_basis_points():
    assert commission_for(25000, 2000) == 5000
    assert commission_for(999, 2000) == 199


async def test_application_waits_for_approval(db, owner):
    service = AffiliateService(db)
    affiliate = await service.apply(owner.id, APPLICATION)
    assert affiliate.status == AffiliateStatus.PENDING
    assert affiliate.approved_at is None

    with pytest.raises(DomainError, match="already have an affiliate account"):
        await service.apply(owner.id, APPLICATION)

    # Pending partners cannot send traffic yet
    assert await service.track_click(affiliate.referral_code) is None
    validation = await service.validate_code(affiliate.referral_code.lower())
    assert validation == {"is_valid": False, "affiliate_id": affiliate.id}


async def test_application_without_approval_step(db, owner):
    await AffiliateAdminService(db).update_settings({"require_approval": False})
    affiliate = await AffiliateService(db).apply(owner.id, APPLICATION)
    assert affiliate.status == AffiliateStatus.APPROVED
    assert affiliate.approved_at is not None


async def test_closed_program_rejects_applications(db, owner):
    await AffiliateAdminService(db).update_settings({"program_active": False})
    with pytest.raises(InvalidStateError):
        await AffiliateService(db).apply(owner.id, APPLICATION)


async def test_click_and_signup_attribution(db, owner, affiliate):
    service = AffiliateService(db)
    click_id = await service.track_click(affiliate.referral_code.lower(), landing_page="/pricing")
    assert click_id is not None
    assert affiliate.total_clicks == 1

    # The affiliate's own signup does not count
    assert not await service.track_signup(click_id, owner.id, None)

    newcomer = User(firebase_uid="friend-uid", email="friend@example.com")
    db.add(newcomer)
    await db.flush()
    assert await service.track_signup(click_id, newcomer.id, None)
    assert affiliate.total_signups == 1

    # A click is attributed once
    assert not await service.track_signup(click_id, newcomer.id, None)
    assert not await service.track_signup("no-such-click", newcomer.id, None)


async def test_expired_click_is_not_attributed(db, affiliate):
    service = AffiliateService(db)
    click_id = await service.track_click(affiliate.referral_code)
    referral = (
        await db.execute(select(AffiliateReferral).where(AffiliateReferral.click_id == click_id))
    ).scalar_one()
    referral.attribution_expires_at = datetime.utcnow() - timedelta(minutes=1)
    await db.flush()

    newcomer = User(firebase_uid="late-uid", email="late@example.com")
    db.add(newcomer)
    await db.flush()
    assert not await service.track_signup(click_id, newcomer.id, None)


async def test_first_payment_converts_and_earns(db, affiliate, referred_business):
    service = AffiliateService(db)
    commission = await service.record_commission(
        referred_business.id, 25000, billing_month=date(2026, 10, 14)
    )

    assert commission.commission_amount_cents == 5000
    assert commission.billing_month == date(2026, 10, 1)
    assert commission.status == AffiliateCommissionStatus.EARNED
    assert affiliate.total_paid_signups == 1
    assert affiliate.total_commission_earned_cents == 5000
    assert affiliate.pending_commission_cents == 5000

    # Same billing month again
    assert await service.record_commission(referred_business.id, 25000, date(2026, 10, 1)) is None
    assert await service.record_commission(referred_business.id, 25000, date(2026, 11, 1)) is not None


async def test_one_time_program_pays_first_payment_only(db, affiliate, referred_business):
    await AffiliateAdminService(db).update_settings(
        {"commission_type": AffiliateCommissionType.ONE_TIME}
    )
    service = AffiliateService(db)
    assert await service.record_commission(referred_business.id, 25000, date(2026, 10, 1))
    assert await service.record_commission(referred_business.id, 25000, date(2026, 11, 1)) is None


async def test_recurring_months_cap(db, affiliate, referred_business):
    await AffiliateAdminService(db).update_settings({"recurring_months": 1})
    service = AffiliateService(db)
    assert await service.record_commission(referred_business.id, 25000, date(2026, 10, 1))
    assert await service.record_commission(referred_business.id, 25000, date(2026, 11, 1)) is None


async def test_unreferred_business_earns_nothing(db, business):
    assert await AffiliateService(db).record_commission(business.id, 25000) is None


async def test_request_payout(db, owner, affiliate, referred_business):
    service = AffiliateService(db)
    await service.record_commission(referred_business.id, 15000, date(2026, 9, 1))

    with pytest.raises(DomainError, match="Balance below minimum payout threshold"):
        await service.request_payout(owner.id)

    await service.record_commission(referred_business.id, 15000, date(2026, 10, 1))
    payout = await service.request_payout(owner.id)

    assert payout.status == AffiliatePayoutStatus.PENDING
    assert payout.amount_cents == 6000
    assert payout.commission_count == 2
    assert payout.payout_method == "e_transfer"
    assert payout.period_end == date.today()

    commissions = (
        await db.execute(
            select(AffiliateCommission).where(AffiliateCommission.affiliate_id == affiliate.id)
        )
    ).scalars().all()
    assert {c.status for c in commissions} == {AffiliateCommissionStatus.PENDING_PAYOUT}
    assert {c.payout_id for c in commissions} == {payout.id}

    with pytest.raises(InvalidStateError, match="A payout request is already pending"):
        await service.request_payout(owner.id)

    pending = await AffiliateAdminService(db).get_pending_payouts()
    assert [p.id for p in pending] == [payout.id]


async def test_payout_needs_a_payout_method(db, owner, affiliate, referred_business):
    service = AffiliateService(db)
    await service.update_profile(owner.id, {"payout_method": None})
    await service.record_commission(referred_business.id, 50000, date(2026, 10, 1))

    with pytest.raises(DomainError, match="payout method"):
        await service.request_payout(owner.id)


async def test_referral_to_payout_over_http(client, db, auth_as, owner, super_admin):
    response = await client.post(
        "/v1/affiliates/apply",
        json={"company_name": "Maple Referrals", "payout_method": "paypal"},
    )
    assert response.status_code == 201
    affiliate = response.json()
    assert affiliate["status"] == "pending"

    await AffiliateAdminService(db).approve_affiliate(UUID(affiliate["id"]), super_admin.id)
    await db.commit()

    code = affiliate["referral_code"]
    response = await client.get(f"/v1/affiliates/codes/{code}")
    assert response.json()["is_valid"] is True

    response = await client.post(f"/v1/affiliates/codes/{code}/clicks", json={"landing_page": "/"})
    click_id = response.json()["click_id"]
    assert click_id

    auth_as.update(uid="referred-uid", email="referred@example.com")
    response = await client.post(
        "/v1/businesses",
        json={"business_name": "Referred Homes", "referral_click_id": click_id},
    )
    assert response.status_code == 201
    business_id = response.json()["id"]

    auth_as.update(uid="admin-uid", email="admin@rentline.app")
    response = await client.post(
        "/v1/super-admin/affiliates/commissions",
        json={"business_id": business_id, "payment_amount_cents": 30000},
    )
    assert response.status_code == 200
    assert response.json()["commission_amount_cents"] == 6000

    auth_as.update(uid="owner-uid", email="owner@example.com")
    response = await client.get("/v1/affiliates/me/stats")
    assert response.json()["total_paid_signups"] == 1
    assert response.json()["pending_commission_cents"] == 6000

    response = await client.post("/v1/affiliates/me/payouts")
    assert response.status_code == 201
    assert response.json()["amount_cents"] == 6000
    assert response.json()["status"] == "pending"

    response = await client.post("/v1/affiliates/me/payouts")
    assert response.status_code == 400
    assert response.json() == {"detail": "A payout request is already pending"}
