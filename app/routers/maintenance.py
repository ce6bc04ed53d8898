"""Maintenance router."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import MaintenanceStatus
from app.schemas.maintenance import (
    MaintenanceComplete,
    MaintenanceCreate,
    MaintenanceResponse,
    MaintenanceUpdate,
)
from app.services.maintenance import MaintenanceService

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance_request(
    data: MaintenanceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Open a maintenance request on a unit."""
    request = await MaintenanceService(db).create_request(
        current_user.business_id, data.model_dump(), created_by_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(request)
    return MaintenanceResponse.model_validate(request)


@router.get("", response_model=List[MaintenanceResponse])
async def list_maintenance_requests(
    status_filter: Optional[MaintenanceStatus] = Query(default=None, alias="status"),
    unit_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List maintenance requests."""
    requests = await MaintenanceService(db).list_requests(
        current_user.business_id, status=status_filter, unit_id=unit_id
    )
    return [MaintenanceResponse.model_validate(r) for r in requests]


@router.get("/{request_id}", response_model=MaintenanceResponse)
async def get_maintenance_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a maintenance request by ID."""
    request = await MaintenanceService(db).get_request(current_user.business_id, request_id)
    return MaintenanceResponse.model_validate(request)


@router.patch("/{request_id}", response_model=MaintenanceResponse)
async def update_maintenance_request(
    request_id: UUID,
    data: MaintenanceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a maintenance request."""
    request = await MaintenanceService(db).update_request(
        current_user.business_id, request_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(request)
    return MaintenanceResponse.model_validate(request)


@router.post("/{request_id}/complete", response_model=MaintenanceResponse)
async def complete_maintenance_request(
    request_id: UUID,
    data: MaintenanceComplete,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Close a maintenance request."""
    request = await MaintenanceService(db).complete_request(
        current_user.business_id, request_id, actual_cost_cents=data.actual_cost_cents
    )
    await db.commit()
    await db.refresh(request)
    return MaintenanceResponse.model_validate(request)
