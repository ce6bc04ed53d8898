"""Quick-start onboarding progression."""

import pytest

from app.core.errors import InvalidStateError
from app.models.user import User
from app.services.onboarding import OnboardingService, OnboardingStep
from app.services.property import PropertyService
from app.services.unit import UnitService


async def test_user_without_business_starts_at_business_step(db):
    user = User(firebase_uid="new-uid", email="new@example.com")
    db.add(user)
    await db.flush()

    service = OnboardingService(db)
    assert await service.get_step(user.id) == OnboardingStep.BUSINESS
    assert await service.should_show_onboarding(user.id)


async def test_steps_advance_with_first_property_and_unit(db, owner, business, property_payload):
    service = OnboardingService(db)
    assert await service.get_step(owner.id) == OnboardingStep.PROPERTY

    prop = await PropertyService(db).create_property(
        business.id, property_payload(), created_by_id=owner.id
    )
    assert await service.get_step(owner.id) == OnboardingStep.UNIT

    second = await PropertyService(db).create_property(
        business.id, property_payload("Second"), created_by_id=owner.id
    )
    state = await service.get_state(owner.id)
    assert state.first_property_id == prop.id
    assert state.first_property_id != second.id

    unit = await UnitService(db).create_unit(
        business.id, prop.id, {"unit_number": "101"}, created_by_id=owner.id
    )
    assert await service.get_step(owner.id) == OnboardingStep.DONE

    described = await service.describe(owner.id)
    assert described["first_unit_id"] == unit.id
    assert described["show_onboarding"] is False
    assert described["show_post_onboarding"] is True

    await service.dismiss_post_onboarding(owner.id)
    assert not await service.should_show_post_onboarding(owner.id)


async def test_unit_step_requires_property_step(db, owner, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    unit = await UnitService(db).create_unit(business.id, prop.id, {"unit_number": "1"})

    with pytest.raises(InvalidStateError):
        await OnboardingService(db).mark_unit_added(owner.id, unit.id)


async def test_direct_unit_creation_completes_both_steps(db, owner, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    await UnitService(db).create_unit(
        business.id, prop.id, {"unit_number": "1"}, created_by_id=owner.id
    )

    state = await OnboardingService(db).get_state(owner.id)
    assert state.has_added_property
    assert state.first_property_id == prop.id
    assert state.has_added_unit


async def test_onboarding_endpoints(client, business):
    response = await client.get("/v1/onboarding")
    assert response.status_code == 200
    body = response.json()
    assert body["step"] == "property"
    assert body["show_onboarding"] is True

    response = await client.post("/v1/onboarding/dismiss")
    assert response.status_code == 200
    assert response.json()["show_onboarding"] is False
    assert response.json()["step"] == "property"
