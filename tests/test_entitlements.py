"""Package limits, add-on capacity and LIMIT_REACHED enforcement."""

import pytest
from sqlalchemy import func, select

from app.core.errors import LimitReached, LimitedResource
from app.models.enums import AddonType
from app.models.package import UNLIMITED, AddonProduct
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.services.addon import AddonService
from app.services.business import BusinessService
from app.services.entitlements import EntitlementService, limit_percentage
from app.services.package_tier import PackageTierService
from app.services.property import PropertyService
from app.services.tenant import TenantService
from app.services.unit import UnitService


def _property(name: str) -> dict:
    return {
        "name": name,
        "address_line1": "1 Harbour Road",
        "city": "Halifax",
        "state": "NS",
        "postal_code": "B3H 1A1",
    }


async def _fill_properties(db, business_id, count: int) -> None:
    service = PropertyService(db)
    for i in range(count):
        await service.create_property(business_id, _property(f"Building {i}"))
    await db.commit()


async def _property_count(db, business_id) -> int:
    result = await db.execute(
        select(func.count(Property.id)).where(Property.business_id == business_id)
    )
    return result.scalar()


def test_limit_percentage():
    assert limit_percentage(3, 5, False) == 60
    assert limit_percentage(1, 3, False) == 33
    assert limit_percentage(4, UNLIMITED, True) == 0
    assert limit_percentage(2, 0, False) == 0


async def test_defaults_apply_without_a_tier(db, business):
    limits = await EntitlementService(db).get_limits(business.id)
    assert limits[LimitedResource.PROPERTY].limit == 5
    assert limits[LimitedResource.UNIT].limit == 10
    assert limits[LimitedResource.TEAM_MEMBER].limit == 1
    assert not limits[LimitedResource.PROPERTY].is_unlimited


async def test_property_limit_is_enforced_before_insert(db, business):
    await _fill_properties(db, business.id, 5)

    with pytest.raises(LimitReached) as exc_info:
        await PropertyService(db).create_property(business.id, _property("One too many"))

    err = exc_info.value
    assert str(err) == "LIMIT_REACHED:property"
    assert err.current == 5
    assert err.limit == 5
    assert await _property_count(db, business.id) == 5


async def test_active_addons_raise_the_limit(db, business):
    product = AddonProduct(
        name="Two extra properties",
        addon_type=AddonType.PROPERTY,
        quantity_per_unit=2,
        price_cents=900,
    )
    db.add(product)
    await db.flush()
    purchase = await AddonService(db).purchase_addon(business.id, product.id, quantity=1)
    await db.commit()

    limits = await EntitlementService(db).get_limits(business.id)
    assert limits[LimitedResource.PROPERTY].limit == 7

    await AddonService(db).cancel_addon(business.id, purchase.id)
    await db.commit()
    limits = await EntitlementService(db).get_limits(business.id)
    assert limits[LimitedResource.PROPERTY].limit == 5


async def test_unlimited_tier_and_custom_override(db, business):
    tiers = PackageTierService(db)
    tier = await tiers.create_tier(
        {
            "tier_name": "Portfolio",
            "tier_slug": "portfolio",
            "display_name": "Portfolio",
            "max_properties": UNLIMITED,
            "max_units": 50,
        }
    )
    await tiers.assign_tier(business.id, tier.id)
    await db.commit()

    entitlements = EntitlementService(db)
    limits = await entitlements.get_limits(business.id)
    assert limits[LimitedResource.PROPERTY].is_unlimited
    assert limits[LimitedResource.UNIT].limit == 50
    await _fill_properties(db, business.id, 6)
    assert await entitlements.check_limit(business.id, LimitedResource.PROPERTY)

    await tiers.update_business_settings(business.id, {"custom_max_units": 3})
    await db.commit()
    limits = await entitlements.get_limits(business.id)
    assert limits[LimitedResource.UNIT].limit == 3


async def test_second_business_counts_against_the_first(db, owner, business):
    with pytest.raises(LimitReached) as exc_info:
        await BusinessService(db).create_business(
            owner.id, {"business_name": "Second Co"}, current_business_id=business.id
        )
    assert exc_info.value.resource == LimitedResource.BUSINESS


async def test_usage_summary(db, business):
    await _fill_properties(db, business.id, 2)
    summary = await EntitlementService(db).get_usage_summary(business.id)
    assert summary["property"] == {
        "resource": "property",
        "current": 2,
        "limit": 5,
        "percentage": 40,
        "at_limit": False,
        "is_unlimited": False,
    }
    assert summary["team_member"]["at_limit"] is True


async def test_api_returns_402_with_limit_details(client, db, business, property_payload):
    await _fill_properties(db, business.id, 5)

    response = await client.post("/v1/properties", json=property_payload("Overflow"))

    assert response.status_code == 402
    assert response.json() == {
        "detail": "LIMIT_REACHED:property",
        "resource": "property",
        "current": 5,
        "limit": 5,
    }
    assert await _property_count(db, business.id) == 5

    response = await client.get("/v1/entitlements/property")
    assert response.status_code == 200
    assert response.json()["at_limit"] is True


async def _count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar()


async def _fill_units(db, business_id, count: int) -> list[Unit]:
    prop = await PropertyService(db).create_property(business_id, _property("Harbour Flats"))
    units = UnitService(db)
    created = [
        await units.create_unit(business_id, prop.id, {"unit_number": str(100 + i)})
        for i in range(count)
    ]
    await db.commit()
    return created


def _tenant(unit: Unit, i: int) -> dict:
    return {
        "unit_id": unit.id,
        "first_name": f"Renter{i}",
        "last_name": "Doe",
        "email": f"renter{i}@example.com",
    }


async def test_unit_limit_is_enforced_before_insert(db, business):
    units = await _fill_units(db, business.id, 10)

    with pytest.raises(LimitReached) as exc_info:
        await UnitService(db).create_unit(business.id, units[0].property_id, {"unit_number": "999"})

    assert str(exc_info.value) == "LIMIT_REACHED:unit"
    assert exc_info.value.current == 10
    assert await _count(db, Unit) == 10


async def test_tenant_limit_is_enforced_before_insert(db, business):
    units = await _fill_units(db, business.id, 10)
    tenants = TenantService(db)
    for i, unit in enumerate(units):
        await tenants.create_tenant(business.id, _tenant(unit, i))
    await db.commit()

    with pytest.raises(LimitReached) as exc_info:
        await tenants.create_tenant(business.id, _tenant(units[0], 99))

    assert str(exc_info.value) == "LIMIT_REACHED:tenant"
    assert exc_info.value.current == 10
    assert exc_info.value.limit == 10
    assert await _count(db, Tenant) == 10


async def test_tenants_of_removed_property_free_capacity(db, business):
    units = await _fill_units(db, business.id, 3)
    tenants = TenantService(db)
    for i, unit in enumerate(units):
        await tenants.create_tenant(business.id, _tenant(unit, i))
    await db.commit()

    entitlements = EntitlementService(db)
    assert (await entitlements.get_usage(business.id))[LimitedResource.TENANT] == 3

    await PropertyService(db).delete_property(business.id, units[0].property_id)
    await db.commit()

    usage = await entitlements.get_usage(business.id)
    assert usage[LimitedResource.TENANT] == 0
    assert usage[LimitedResource.UNIT] == 0


async def test_limit_reached_is_logged(db, business, caplog):
    units = await _fill_units(db, business.id, 10)

    with caplog.at_level("WARNING", logger="app.services.entitlements"):
        with pytest.raises(LimitReached):
            await UnitService(db).create_unit(
                business.id, units[0].property_id, {"unit_number": "999"}
            )

    assert f"[ENTITLEMENTS] Limit reached for business {business.id}: unit 10/10" in caplog.text
