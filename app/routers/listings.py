"""Listings, rental applications and the public apply page."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import ApplicationStatus, ListingStatus
from app.schemas.listing import (
    ApplicationConvert,
    ApplicationReject,
    ApplicationResponse,
    ApplicationReview,
    ApplicationSubmit,
    ListingFromUnit,
    ListingResponse,
    ListingStats,
    ListingUpdate,
    PublicListingResponse,
)
from app.schemas.tenant import TenantResponse
from app.services.listing import ListingService
from app.services.rental_application import RentalApplicationService

router = APIRouter(prefix="/listings", tags=["listings"])
applications_router = APIRouter(prefix="/applications", tags=["applications"])
public_router = APIRouter(prefix="/apply", tags=["public"])


# === Listings ===

@router.post(
    "/from-unit/{unit_id}",
    response_model=ListingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_listing_from_unit(
    unit_id: UUID,
    data: ListingFromUnit,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Draft listing pre-filled from a unit."""
    listing = await ListingService(db).create_listing_from_unit(
        current_user.business_id, unit_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(listing)
    return ListingResponse.model_validate(listing)


@router.get("", response_model=List[ListingResponse])
async def list_listings(
    status_filter: Optional[ListingStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List the business's listings."""
    listings = await ListingService(db).list_business_listings(
        current_user.business_id, status_filter
    )
    return [ListingResponse.model_validate(listing) for listing in listings]


@router.get("/by-unit/{unit_id}", response_model=Optional[ListingResponse])
async def get_listing_by_unit(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """The current listing for a unit, if any."""
    listing = await ListingService(db).get_listing_by_unit(current_user.business_id, unit_id)
    return ListingResponse.model_validate(listing) if listing else None


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a listing by ID."""
    listing = await ListingService(db).get_listing(current_user.business_id, listing_id)
    return ListingResponse.model_validate(listing)


@router.patch("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: UUID,
    data: ListingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a listing."""
    listing = await ListingService(db).update_listing(
        current_user.business_id, listing_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(listing)
    return ListingResponse.model_validate(listing)


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Delete a listing."""
    await ListingService(db).delete_listing(current_user.business_id, listing_id)
    await db.commit()


@router.post("/{listing_id}/publish", response_model=ListingResponse)
async def publish_listing(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Make a listing public."""
    listing = await ListingService(db).publish_listing(current_user.business_id, listing_id)
    await db.commit()
    await db.refresh(listing)
    return ListingResponse.model_validate(listing)


@router.post("/{listing_id}/unpublish", response_model=ListingResponse)
async def unpublish_listing(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Take a listing offline."""
    listing = await ListingService(db).unpublish_listing(current_user.business_id, listing_id)
    await db.commit()
    await db.refresh(listing)
    return ListingResponse.model_validate(listing)


@router.post("/{listing_id}/rented", response_model=ListingResponse)
async def mark_listing_rented(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Close a listing as rented."""
    listing = await ListingService(db).mark_as_rented(current_user.business_id, listing_id)
    await db.commit()
    await db.refresh(listing)
    return ListingResponse.model_validate(listing)


@router.get("/{listing_id}/stats", response_model=ListingStats)
async def get_listing_stats(
    listing_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Views, applications and days listed."""
    stats = await ListingService(db).get_listing_stats(current_user.business_id, listing_id)
    return ListingStats(**stats)


# === Applications ===

@applications_router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    listing_id: Optional[UUID] = None,
    status_filter: Optional[ApplicationStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List rental applications."""
    applications = await RentalApplicationService(db).list_applications(
        current_user.business_id, listing_id=listing_id, status=status_filter
    )
    return [ApplicationResponse.model_validate(a) for a in applications]


@applications_router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get an application by ID."""
    application = await RentalApplicationService(db).get_application(
        current_user.business_id, application_id
    )
    return ApplicationResponse.model_validate(application)


@applications_router.post("/{application_id}/review", response_model=ApplicationResponse)
async def review_application(
    application_id: UUID,
    data: ApplicationReview,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Move an application under review with rating and notes."""
    application = await RentalApplicationService(db).review_application(
        current_user.business_id,
        application_id,
        current_user.db_user_id,
        rating=data.landlord_rating,
        notes=data.landlord_notes,
    )
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)


@applications_router.post("/{application_id}/approve", response_model=ApplicationResponse)
async def approve_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Approve an application."""
    application = await RentalApplicationService(db).approve_application(
        current_user.business_id, application_id, reviewer_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)


@applications_router.post("/{application_id}/reject", response_model=ApplicationResponse)
async def reject_application(
    application_id: UUID,
    data: ApplicationReject,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Reject an application."""
    application = await RentalApplicationService(db).reject_application(
        current_user.business_id,
        application_id,
        reason=data.reason,
        reviewer_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)


@applications_router.post("/{application_id}/convert", response_model=TenantResponse)
async def convert_application(
    application_id: UUID,
    data: ApplicationConvert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Approve and turn the applicant into a tenant."""
    _, tenant = await RentalApplicationService(db).approve_and_convert_to_tenant(
        current_user.business_id,
        application_id,
        data.model_dump(exclude_unset=True),
        actor_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(tenant)
    return TenantResponse.model_validate(tenant)


# === Public ===

@public_router.get("/{code}", response_model=PublicListingResponse)
async def get_public_listing(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    """Active listing by its public code (no auth)."""
    listing = await ListingService(db).get_public_listing(code)
    await db.commit()
    return PublicListingResponse.model_validate(listing)


@public_router.post(
    "/{code}",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    code: str,
    data: ApplicationSubmit,
    db: AsyncSession = Depends(get_db),
):
    """Submit a rental application (no auth)."""
    application = await RentalApplicationService(db).submit_application(code, data.model_dump())
    await db.commit()
    await db.refresh(application)
    return ApplicationResponse.model_validate(application)
