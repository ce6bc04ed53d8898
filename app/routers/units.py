"""Units router - business-wide unit views and unit detail."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.schemas.lease import LeaseResponse
from app.schemas.property import (
    UnitOccupancyUpdate,
    UnitResponse,
    UnitStats,
    UnitUpdate,
)
from app.schemas.tenant import TenantResponse
from app.services.unit import UnitService

router = APIRouter(prefix="/units", tags=["units"])


@router.get("/vacant", response_model=List[UnitResponse])
async def list_vacant_units(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Vacant units across all properties."""
    units = await UnitService(db).list_vacant_units(current_user.business_id)
    return [UnitResponse.model_validate(u) for u in units]


@router.get("/occupied", response_model=List[UnitResponse])
async def list_occupied_units(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Occupied units across all properties."""
    units = await UnitService(db).list_occupied_units(current_user.business_id)
    return [UnitResponse.model_validate(u) for u in units]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a unit by ID."""
    unit = await UnitService(db).get_unit(current_user.business_id, unit_id)
    return UnitResponse.model_validate(unit)


@router.patch("/{unit_id}", response_model=UnitResponse)
async def update_unit(
    unit_id: UUID,
    data: UnitUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a unit."""
    unit = await UnitService(db).update_unit(
        current_user.business_id, unit_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(unit)
    return UnitResponse.model_validate(unit)


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Soft-delete a unit."""
    await UnitService(db).delete_unit(current_user.business_id, unit_id)
    await db.commit()


@router.put("/{unit_id}/occupancy", response_model=UnitResponse)
async def update_occupancy_status(
    unit_id: UUID,
    data: UnitOccupancyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Set a unit's occupancy status."""
    unit = await UnitService(db).update_occupancy_status(
        current_user.business_id, unit_id, data.occupancy_status
    )
    await db.commit()
    await db.refresh(unit)
    return UnitResponse.model_validate(unit)


@router.get("/{unit_id}/tenants", response_model=List[TenantResponse])
async def get_unit_tenants(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Active tenants of a unit."""
    tenants = await UnitService(db).get_unit_tenants(current_user.business_id, unit_id)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/{unit_id}/lease", response_model=Optional[LeaseResponse])
async def get_unit_lease(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """The unit's active lease, if any."""
    lease = await UnitService(db).get_unit_lease(current_user.business_id, unit_id)
    return LeaseResponse.model_validate(lease) if lease else None


@router.get("/{unit_id}/stats", response_model=UnitStats)
async def get_unit_stats(
    unit_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Tenant, lease and maintenance figures for a unit."""
    return UnitStats(**await UnitService(db).get_unit_stats(current_user.business_id, unit_id))
