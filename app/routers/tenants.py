"""Tenants router."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import TenantStatus
from app.schemas.tenant import TenantCreate, TenantResponse, TenantStats, TenantUpdate
from app.services.tenant import TenantService

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    data: TenantCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Create a tenant on a unit (subject to the package tenant limit)."""
    tenant = await TenantService(db).create_tenant(
        current_user.business_id, data.model_dump(), actor_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(tenant)
    return TenantResponse.model_validate(tenant)


@router.get("", response_model=List[TenantResponse])
async def list_tenants(
    status_filter: Optional[TenantStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List tenants, optionally by status."""
    tenants = await TenantService(db).list_tenants(current_user.business_id, status_filter)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/active", response_model=List[TenantResponse])
async def list_active_tenants(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Tenants currently renting."""
    tenants = await TenantService(db).get_active_tenants(current_user.business_id)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/search", response_model=List[TenantResponse])
async def search_tenants(
    q: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Search by name, e-mail or phone."""
    tenants = await TenantService(db).search_tenants(current_user.business_id, q)
    return [TenantResponse.model_validate(t) for t in tenants]


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a tenant by ID."""
    tenant = await TenantService(db).get_tenant(current_user.business_id, tenant_id)
    return TenantResponse.model_validate(tenant)


@router.patch("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a tenant."""
    tenant = await TenantService(db).update_tenant(
        current_user.business_id, tenant_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(tenant)
    return TenantResponse.model_validate(tenant)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Soft-delete a tenant."""
    await TenantService(db).delete_tenant(current_user.business_id, tenant_id)
    await db.commit()


@router.post("/{tenant_id}/invite", response_model=TenantResponse)
async def invite_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Queue a tenant portal invitation e-mail."""
    tenant = await TenantService(db).invite_tenant_to_portal(
        current_user.business_id, tenant_id, actor_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(tenant)
    return TenantResponse.model_validate(tenant)


@router.get("/{tenant_id}/stats", response_model=TenantStats)
async def get_tenant_stats(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Payment and maintenance figures for a tenant."""
    stats = await TenantService(db).get_tenant_stats(current_user.business_id, tenant_id)
    return TenantStats(**stats)
