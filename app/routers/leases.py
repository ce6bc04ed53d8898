"""Leases router."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import LeaseStatus
from app.schemas.lease import LeaseCreate, LeaseResponse, LeaseUpdate
from app.services.lease import LeaseService

router = APIRouter(prefix="/leases", tags=["leases"])


@router.post("", response_model=LeaseResponse, status_code=status.HTTP_201_CREATED)
async def create_lease(
    data: LeaseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Create a draft lease."""
    lease = await LeaseService(db).create_lease(current_user.business_id, data.model_dump())
    await db.commit()
    await db.refresh(lease)
    return LeaseResponse.model_validate(lease)


@router.get("", response_model=List[LeaseResponse])
async def list_leases(
    status_filter: Optional[LeaseStatus] = Query(default=None, alias="status"),
    unit_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List leases, optionally by status or unit."""
    leases = await LeaseService(db).list_leases(
        current_user.business_id, status=status_filter, unit_id=unit_id
    )
    return [LeaseResponse.model_validate(lease) for lease in leases]


@router.get("/{lease_id}", response_model=LeaseResponse)
async def get_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a lease by ID."""
    lease = await LeaseService(db).get_lease(current_user.business_id, lease_id)
    return LeaseResponse.model_validate(lease)


@router.patch("/{lease_id}", response_model=LeaseResponse)
async def update_lease(
    lease_id: UUID,
    data: LeaseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a lease that has not started."""
    lease = await LeaseService(db).update_lease(
        current_user.business_id, lease_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(lease)
    return LeaseResponse.model_validate(lease)


@router.post("/{lease_id}/activate", response_model=LeaseResponse)
async def activate_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Activate a lease; its unit becomes occupied."""
    lease = await LeaseService(db).activate_lease(
        current_user.business_id, lease_id, actor_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(lease)
    return LeaseResponse.model_validate(lease)


@router.post("/{lease_id}/terminate", response_model=LeaseResponse)
async def terminate_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Terminate an active lease."""
    lease = await LeaseService(db).terminate_lease(
        current_user.business_id, lease_id, actor_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(lease)
    return LeaseResponse.model_validate(lease)
