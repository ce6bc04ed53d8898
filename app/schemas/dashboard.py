"""Dashboard schemas."""

from app.schemas.base import BaseSchema
from app.schemas.package import UsageSummary


class DashboardStats(BaseSchema):
    """Headline figures for the business dashboard."""

    total_properties: int
    total_units: int
    occupied_units: int
    vacant_units: int
    occupancy_rate: float
    active_tenants: int
    monthly_rent_roll_cents: int
    open_maintenance: int
    usage: UsageSummary
