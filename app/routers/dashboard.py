"""Dashboard router - aggregate stats for the business overview."""

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import LeaseStatus, OccupancyStatus
from app.models.lease import Lease
from app.models.maintenance import MaintenanceRequest
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.schemas.dashboard import DashboardStats
from app.schemas.package import UsageSummary
from app.services.entitlements import EntitlementService
from app.services.property import OPEN_MAINTENANCE

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get aggregate dashboard statistics for the business.

    Returns:
    - Property and unit counts with occupancy
    - Active tenants
    - Monthly rent roll (active leases)
    - Open maintenance requests
    - Usage against package limits
    """
    business_id = current_user.business_id

    prop_query = await db.execute(
        select(func.count(Property.id)).where(
            Property.business_id == business_id,
            Property.is_active == True,  # noqa: E712
        )
    )
    total_properties = prop_query.scalar() or 0

    # Unit counts
    unit_query = await db.execute(
        select(
            func.count(Unit.id).label("total"),
            func.sum(case((Unit.occupancy_status == OccupancyStatus.OCCUPIED, 1), else_=0)).label("occupied"),
            func.sum(case((Unit.occupancy_status == OccupancyStatus.VACANT, 1), else_=0)).label("vacant"),
        )
        .join(Property, Unit.property_id == Property.id)
        .where(
            Property.business_id == business_id,
            Property.is_active == True,  # noqa: E712
            Unit.is_active == True,  # noqa: E712
        )
    )
    unit_stats = unit_query.one()

    tenant_query = await db.execute(
        select(func.count(Tenant.id))
        .join(Unit, Tenant.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
        .where(
            Property.business_id == business_id,
            Tenant.is_active == True,  # noqa: E712
        )
    )

    # Revenue (active leases only)
    revenue_query = await db.execute(
        select(func.coalesce(func.sum(Lease.monthly_rent_cents), 0))
        .join(Unit, Lease.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
        .where(
            Property.business_id == business_id,
            Lease.status == LeaseStatus.ACTIVE,
        )
    )

    maint_query = await db.execute(
        select(func.count(MaintenanceRequest.id))
        .join(Unit, MaintenanceRequest.unit_id == Unit.id)
        .join(Property, Unit.property_id == Property.id)
        .where(
            Property.business_id == business_id,
            MaintenanceRequest.status.in_(OPEN_MAINTENANCE),
        )
    )

    total_units = unit_stats.total or 0
    occupied = unit_stats.occupied or 0
    usage = await EntitlementService(db).get_usage_summary(business_id)

    return DashboardStats(
        total_properties=total_properties,
        total_units=total_units,
        occupied_units=occupied,
        vacant_units=unit_stats.vacant or 0,
        occupancy_rate=round(occupied / max(total_units, 1) * 100, 1),
        active_tenants=tenant_query.scalar() or 0,
        monthly_rent_roll_cents=revenue_query.scalar() or 0,
        open_maintenance=maint_query.scalar() or 0,
        usage=UsageSummary(**usage),
    )
