"""Tenants, leases, rent payments and maintenance requests."""

from datetime import date

import pytest
from sqlalchemy import select

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.models.enums import (
    LeaseStatus,
    MaintenanceStatus,
    OccupancyStatus,
    PaymentMethod,
    PaymentStatus,
    TenantType,
)
from app.models.jobs import JobsOutbox
from app.models.user import User
from app.services.business import BusinessService
from app.services.lease import LeaseService
from app.services.maintenance import MaintenanceService
from app.services.payment import PaymentService
from app.services.property import PropertyService
from app.services.tenant import TenantService
from app.services.unit import UnitService


@pytest.fixture
async def unit(db, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    unit = await UnitService(db).create_unit(
        business.id, prop.id, {"unit_number": "3A", "monthly_rent_cents": 160000}
    )
    await db.commit()
    return unit


def _tenant(unit, first_name="Sam", **extra) -> dict:
    return {
        "unit_id": unit.id,
        "first_name": first_name,
        "last_name": "Lee",
        "email": f"{first_name.lower()}@example.com",
        **extra,
    }


async def test_unit_occupancy_follows_tenants(db, business, unit):
    tenants = TenantService(db)
    primary = await tenants.create_tenant(business.id, _tenant(unit))
    assert unit.occupancy_status == OccupancyStatus.OCCUPIED

    co_tenant = await tenants.create_tenant(
        business.id, _tenant(unit, "Robin", tenant_type=TenantType.CO_TENANT)
    )

    await tenants.delete_tenant(business.id, primary.id)
    assert unit.occupancy_status == OccupancyStatus.OCCUPIED

    await tenants.delete_tenant(business.id, co_tenant.id)
    assert unit.occupancy_status == OccupancyStatus.VACANT


async def test_portal_invite_is_queued_once(db, business, unit):
    tenants = TenantService(db)
    tenant = await tenants.create_tenant(business.id, _tenant(unit))

    await tenants.invite_tenant_to_portal(business.id, tenant.id)
    await tenants.invite_tenant_to_portal(business.id, tenant.id)

    jobs = (await db.execute(select(JobsOutbox))).scalars().all()
    assert len(jobs) == 1
    assert jobs[0].unique_scope == f"tenant_portal_invite:{tenant.id}"
    assert tenant.portal_invite_sent_at is not None

    await tenants.update_tenant(business.id, tenant.id, {"has_portal_access": False})
    with pytest.raises(InvalidStateError):
        await tenants.invite_tenant_to_portal(business.id, tenant.id)


async def test_lease_lifecycle(db, business, unit):
    tenant = await TenantService(db).create_tenant(business.id, _tenant(unit))
    leases = LeaseService(db)
    lease = await leases.create_lease(
        business.id,
        {
            "unit_id": unit.id,
            "tenant_id": tenant.id,
            "start_date": date(2026, 11, 1),
            "end_date": date(2027, 10, 31),
            "monthly_rent_cents": 160000,
        },
    )
    assert lease.status == LeaseStatus.DRAFT

    with pytest.raises(DomainError, match="end_date must be after start_date"):
        await leases.update_lease(business.id, lease.id, {"end_date": date(2026, 10, 1)})
    await leases.update_lease(business.id, lease.id, {"end_date": date(2027, 10, 31)})

    active = await leases.activate_lease(business.id, lease.id)
    assert active.status == LeaseStatus.ACTIVE
    assert active.activated_at is not None

    with pytest.raises(InvalidStateError):
        await leases.update_lease(business.id, lease.id, {"rent_due_day": 15})
    with pytest.raises(InvalidStateError):
        await leases.activate_lease(business.id, lease.id)

    terminated = await leases.terminate_lease(business.id, lease.id)
    assert terminated.status == LeaseStatus.TERMINATED


async def test_payments(db, business, unit):
    tenant = await TenantService(db).create_tenant(business.id, _tenant(unit))
    payments = PaymentService(db)
    payment = await payments.record_payment(
        business.id,
        {"tenant_id": tenant.id, "amount_cents": 160000, "due_date": date(2026, 11, 1)},
    )
    assert payment.status == PaymentStatus.PENDING

    paid = await payments.mark_paid(
        business.id, payment.id, paid_date=date(2026, 11, 2), payment_method=PaymentMethod.E_TRANSFER
    )
    assert paid.status == PaymentStatus.PAID
    assert paid.paid_date == date(2026, 11, 2)

    with pytest.raises(InvalidStateError, match="Payment is already paid"):
        await payments.mark_paid(business.id, payment.id)

    stats = await TenantService(db).get_tenant_stats(business.id, tenant.id)
    assert stats["total_payments"] == 1
    assert stats["paid_payments"] == 1


async def test_maintenance_requests(db, business, unit, owner):
    maintenance = MaintenanceService(db)
    request = await maintenance.create_request(
        business.id,
        {"unit_id": unit.id, "title": "Leaking tap", "description": "Kitchen tap drips"},
        created_by_id=owner.id,
    )
    assert request.status == MaintenanceStatus.OPEN

    done = await maintenance.complete_request(business.id, request.id, actual_cost_cents=8500)
    assert done.status == MaintenanceStatus.COMPLETED
    assert done.completed_at is not None
    assert done.actual_cost_cents == 8500

    cancelled = await maintenance.create_request(
        business.id, {"unit_id": unit.id, "title": "Paint", "description": "Hallway"}
    )
    await maintenance.update_request(
        business.id, cancelled.id, {"status": MaintenanceStatus.CANCELLED}
    )
    with pytest.raises(InvalidStateError):
        await maintenance.complete_request(business.id, cancelled.id)


async def test_records_are_scoped_to_business(db, owner, business, unit):
    rival_owner = User(firebase_uid="rival-uid", email="rival@example.com")
    db.add(rival_owner)
    await db.flush()
    rival = await BusinessService(db).create_business(rival_owner.id, {"business_name": "Rival"})

    with pytest.raises(NotFoundError):
        await TenantService(db).create_tenant(rival.id, _tenant(unit))
    with pytest.raises(NotFoundError):
        await MaintenanceService(db).create_request(
            rival.id, {"unit_id": unit.id, "title": "x", "description": "y"}
        )


async def test_tenant_endpoints(client, unit):
    response = await client.post(
        "/v1/tenants",
        json={
            "unit_id": str(unit.id),
            "first_name": "Ari",
            "last_name": "Cole",
            "email": "ari@example.com",
        },
    )
    assert response.status_code == 201
    tenant_id = response.json()["id"]

    response = await client.get("/v1/tenants")
    assert [t["id"] for t in response.json()] == [tenant_id]
