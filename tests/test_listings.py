"""Listings, the public apply flow and applicant conversion."""

from datetime import date

import pytest

from app.core.errors import InvalidStateError, NotFoundError
from app.models.enums import ApplicationStatus, ListingStatus, OccupancyStatus
from app.services.listing import CODE_ALPHABET, CODE_LENGTH, ListingService, generate_listing_code, slugify
from app.services.property import PropertyService
from app.services.rental_application import RentalApplicationService
from app.services.unit import UnitService

APPLICANT = {
    "applicant_first_name": "Jamie",
    "applicant_last_name": "Tran",
    "applicant_email": "jamie@example.com",
    "applicant_phone": "902-555-0101",
}


@pytest.fixture
async def unit(db, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    unit = await UnitService(db).create_unit(
        business.id,
        prop.id,
        {
            "unit_number": "2B",
            "bedrooms": 2,
            "monthly_rent_cents": 145000,
            "security_deposit_cents": 72500,
            "utilities_included": {"water": True, "heat": False},
            "amenities": ["laundry"],
        },
    )
    await db.commit()
    return unit


@pytest.fixture
async def listing(db, business, unit):
    service = ListingService(db)
    listing = await service.create_listing_from_unit(business.id, unit.id)
    await service.publish_listing(business.id, listing.id)
    await db.commit()
    return listing


def test_listing_codes_avoid_ambiguous_characters():
    code = generate_listing_code()
    assert len(code) == CODE_LENGTH
    assert set(code) <= set(CODE_ALPHABET)
    for ambiguous in "01IO":
        assert ambiguous not in CODE_ALPHABET


def test_slugify():
    assert slugify("Elm Street Duplex - Unit 2B") == "elm-street-duplex-unit-2b"
    assert slugify("!!!") == "listing"


async def test_listing_is_prefilled_from_unit(db, business, unit):
    listing = await ListingService(db).create_listing_from_unit(business.id, unit.id)

    assert listing.status == ListingStatus.DRAFT
    assert listing.title == "Elm Street Duplex - Unit 2B"
    assert listing.monthly_rent_cents == 145000
    assert listing.deposit_cents == 72500
    assert listing.bedrooms == 2
    assert listing.utilities_included == ["water"]
    assert listing.amenities == ["laundry"]
    assert listing.slug.startswith("elm-street-duplex-unit-2b-")


async def test_draft_listing_is_not_public(db, business, unit):
    listing = await ListingService(db).create_listing_from_unit(business.id, unit.id)
    with pytest.raises(NotFoundError):
        await ListingService(db).get_public_listing(listing.listing_code)


async def test_rented_listing_cannot_be_republished(db, business, listing):
    service = ListingService(db)
    await service.mark_as_rented(business.id, listing.id)
    with pytest.raises(InvalidStateError):
        await service.publish_listing(business.id, listing.id)


async def test_public_view_counts(db, listing):
    service = ListingService(db)
    await service.get_public_listing(listing.listing_code.lower())
    viewed = await service.get_public_listing(listing.listing_code)
    assert viewed.view_count == 2
    assert viewed.last_viewed_at is not None


async def test_closed_listing_rejects_applications(db, business, listing):
    await ListingService(db).update_listing(
        business.id, listing.id, {"accept_applications": False}
    )
    with pytest.raises(InvalidStateError):
        await RentalApplicationService(db).submit_application(listing.listing_code, dict(APPLICANT))


async def test_review_transitions(db, business, owner, listing):
    service = RentalApplicationService(db)
    application = await service.submit_application(listing.listing_code, dict(APPLICANT))

    reviewed = await service.review_application(
        business.id, application.id, owner.id, rating=4, notes="Good references"
    )
    assert reviewed.status == ApplicationStatus.REVIEWING
    assert reviewed.landlord_rating == 4

    rejected = await service.reject_application(business.id, application.id, reason="Unit filled")
    assert rejected.status == ApplicationStatus.REJECTED
    assert rejected.rejection_reason == "Unit filled"

    with pytest.raises(InvalidStateError):
        await service.approve_application(business.id, application.id)


async def test_apply_and_convert_to_tenant(client, db, business, unit, listing):
    response = await client.get(f"/v1/apply/{listing.listing_code}")
    assert response.status_code == 200
    assert response.json()["title"] == "Elm Street Duplex - Unit 2B"

    response = await client.post(f"/v1/apply/{listing.listing_code}", json=APPLICANT)
    assert response.status_code == 201
    application = response.json()
    assert application["status"] == "submitted"
    assert application["unit_id"] == str(unit.id)

    await db.refresh(listing)
    assert listing.application_count == 1

    response = await client.post(
        f"/v1/applications/{application['id']}/convert",
        json={"lease_start_date": "2026-11-01", "monthly_rent_cents": 145000},
    )
    assert response.status_code == 200
    tenant = response.json()
    assert tenant["first_name"] == "Jamie"
    assert tenant["email"] == "jamie@example.com"
    assert tenant["lease_start_date"] == date(2026, 11, 1).isoformat()

    await db.refresh(unit)
    assert unit.occupancy_status == OccupancyStatus.OCCUPIED

    response = await client.post(
        f"/v1/applications/{application['id']}/convert", json={}
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Application has already been converted"}


async def test_unknown_code_is_404(client):
    response = await client.post("/v1/apply/NOPE2345", json=APPLICANT)
    assert response.status_code == 404
    assert response.json() == {"detail": "Listing not found"}
