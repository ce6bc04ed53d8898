"""Public rental listings built from units."""

import re
import secrets
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError, NotFoundError
from app.models.enums import ListingStatus
from app.models.listing import Listing
from app.models.property import Property
from app.services.unit import UnitService

# No 0/O or 1/I
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8


def generate_listing_code() -> str:
    """Random public code used in /apply/{code} links."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "listing"


class ListingService:
    """Business-scoped listing management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _unique_code(self) -> str:
        while True:
            code = generate_listing_code()
            exists = await self.db.execute(
                select(Listing.id).where(Listing.listing_code == code)
            )
            if exists.scalar_one_or_none() is None:
                return code

    async def _unique_slug(self, title: str) -> str:
        base = slugify(title)[:200]
        while True:
            slug = f"{base}-{secrets.token_hex(3)}"
            exists = await self.db.execute(select(Listing.id).where(Listing.slug == slug))
            if exists.scalar_one_or_none() is None:
                return slug

    async def create_listing_from_unit(
        self,
        business_id: UUID,
        unit_id: UUID,
        overrides: Optional[dict[str, Any]] = None,
    ) -> Listing:
        """Draft listing pre-filled from the unit and its property."""
        unit = await UnitService(self.db).get_unit(business_id, unit_id)
        prop = await self.db.get(Property, unit.property_id)
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

        title = overrides.pop("title", None) or f"{prop.name} - Unit {unit.unit_number}"
        utilities = [name for name, included in (unit.utilities_included or {}).items() if included]

        listing = Listing(
            business_id=business_id,
            property_id=prop.id,
            unit_id=unit.id,
            title=title,
            status=ListingStatus.DRAFT,
            slug=await self._unique_slug(title),
            listing_code=await self._unique_code(),
            available_date=unit.available_date,
            monthly_rent_cents=unit.monthly_rent_cents or 0,
            deposit_cents=unit.security_deposit_cents,
            bedrooms=unit.bedrooms,
            bathrooms=unit.bathrooms,
            square_feet=unit.square_feet,
            amenities=list(unit.amenities or []),
            utilities_included=utilities,
            photos=[],
            furnished=False,
            pets_allowed=False,
            parking_spaces=0,
            accept_applications=True,
            view_count=0,
            application_count=0,
        )
        for field, value in overrides.items():
            setattr(listing, field, value)
        self.db.add(listing)
        await self.db.flush()
        return listing

    async def get_listing(self, business_id: UUID, listing_id: UUID) -> Listing:
        result = await self.db.execute(
            select(Listing).where(
                Listing.id == listing_id,
                Listing.business_id == business_id,
            )
        )
        listing = result.scalar_one_or_none()
        if not listing:
            raise NotFoundError("Listing")
        return listing

    async def get_listing_by_unit(self, business_id: UUID, unit_id: UUID) -> Optional[Listing]:
        result = await self.db.execute(
            select(Listing)
            .where(Listing.business_id == business_id, Listing.unit_id == unit_id)
            .order_by(Listing.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_business_listings(
        self, business_id: UUID, status: Optional[ListingStatus] = None
    ) -> list[Listing]:
        query = select(Listing).where(Listing.business_id == business_id)
        if status:
            query = query.where(Listing.status == status)
        result = await self.db.execute(query.order_by(Listing.created_at.desc()))
        return list(result.scalars().all())

    async def list_property_listings(self, business_id: UUID, property_id: UUID) -> list[Listing]:
        result = await self.db.execute(
            select(Listing)
            .where(Listing.business_id == business_id, Listing.property_id == property_id)
            .order_by(Listing.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_listing(
        self, business_id: UUID, listing_id: UUID, data: dict[str, Any]
    ) -> Listing:
        listing = await self.get_listing(business_id, listing_id)
        for field, value in data.items():
            setattr(listing, field, value)
        await self.db.flush()
        return listing

    async def delete_listing(self, business_id: UUID, listing_id: UUID) -> None:
        listing = await self.get_listing(business_id, listing_id)
        await self.db.delete(listing)
        await self.db.flush()

    async def publish_listing(self, business_id: UUID, listing_id: UUID) -> Listing:
        listing = await self.get_listing(business_id, listing_id)
        if listing.status == ListingStatus.RENTED:
            raise InvalidStateError("A rented listing cannot be published")
        listing.status = ListingStatus.ACTIVE
        if listing.published_at is None:
            listing.published_at = datetime.utcnow()
        await self.db.flush()
        return listing

    async def unpublish_listing(self, business_id: UUID, listing_id: UUID) -> Listing:
        listing = await self.get_listing(business_id, listing_id)
        listing.status = ListingStatus.INACTIVE
        await self.db.flush()
        return listing

    async def mark_as_rented(self, business_id: UUID, listing_id: UUID) -> Listing:
        listing = await self.get_listing(business_id, listing_id)
        listing.status = ListingStatus.RENTED
        await self.db.flush()
        return listing

    async def get_listing_stats(self, business_id: UUID, listing_id: UUID) -> dict:
        listing = await self.get_listing(business_id, listing_id)
        since = listing.published_at or listing.created_at
        days_listed = (datetime.utcnow() - since).days if since else 0
        return {
            "view_count": listing.view_count or 0,
            "application_count": listing.application_count or 0,
            "days_listed": max(0, days_listed),
        }

    async def get_public_listing(self, code: str) -> Listing:
        """Active listing by public code; counts the view."""
        result = await self.db.execute(
            select(Listing).where(
                Listing.listing_code == code.upper(),
                Listing.status == ListingStatus.ACTIVE,
            )
        )
        listing = result.scalar_one_or_none()
        if not listing:
            raise NotFoundError("Listing")
        listing.view_count = (listing.view_count or 0) + 1
        listing.last_viewed_at = datetime.utcnow()
        await self.db.flush()
        return listing
