"""Properties and nested Units router."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.schemas.base import LimitStatus
from app.schemas.listing import ListingResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyStats,
    PropertyUpdate,
    UnitCreate,
    UnitResponse,
)
from app.services.listing import ListingService
from app.services.property import PropertyService
from app.services.unit import UnitService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Create a new property (subject to the package property limit)."""
    prop = await PropertyService(db).create_property(
        current_user.business_id,
        data.model_dump(),
        created_by_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get("", response_model=List[PropertyResponse])
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List active properties for the business."""
    props = await PropertyService(db).list_properties(current_user.business_id)
    return [PropertyResponse.model_validate(p) for p in props]


@router.get("/can-create", response_model=LimitStatus)
async def can_create_property(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Property usage against the package limit."""
    return LimitStatus(**await PropertyService(db).can_create_property(current_user.business_id))


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a property by ID."""
    prop = await PropertyService(db).get_property(current_user.business_id, property_id)
    return PropertyResponse.model_validate(prop)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a property."""
    prop = await PropertyService(db).update_property(
        current_user.business_id, property_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Soft-delete a property."""
    await PropertyService(db).delete_property(current_user.business_id, property_id)
    await db.commit()


@router.get("/{property_id}/stats", response_model=PropertyStats)
async def get_property_stats(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Occupancy, tenant and maintenance figures for a property."""
    stats = await PropertyService(db).get_property_stats(current_user.business_id, property_id)
    return PropertyStats(**stats)


@router.get("/{property_id}/listings", response_model=List[ListingResponse])
async def list_property_listings(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Listings created for units of this property."""
    listings = await ListingService(db).list_property_listings(
        current_user.business_id, property_id
    )
    return [ListingResponse.model_validate(listing) for listing in listings]


# === Units ===

@router.post(
    "/{property_id}/units",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_unit(
    property_id: UUID,
    data: UnitCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Create a unit in a property (subject to the package unit limit)."""
    unit = await UnitService(db).create_unit(
        current_user.business_id,
        property_id,
        data.model_dump(),
        created_by_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(unit)
    return UnitResponse.model_validate(unit)


@router.get("/{property_id}/units", response_model=List[UnitResponse])
async def list_units(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List active units for a property."""
    units = await PropertyService(db).get_property_units(current_user.business_id, property_id)
    return [UnitResponse.model_validate(u) for u in units]
