"""Super-admin console schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from app.models.enums import BusinessStatus, JobStatus
from app.schemas.base import BaseSchema


class PlatformStats(BaseSchema):
    """Platform-wide totals."""

    total_businesses: int
    businesses_by_status: dict[str, int]
    total_users: int
    total_properties: int
    total_units: int
    total_tenants: int
    businesses_by_tier: dict[str, int]


class AdminBusinessResponse(BaseSchema):
    """Business row in the console."""

    id: UUID
    business_name: str
    email: Optional[str] = None
    status: BusinessStatus
    tier_name: Optional[str] = None
    created_at: datetime


class BusinessStatusUpdate(BaseSchema):
    """Change a business's platform status."""

    status: BusinessStatus


class SystemSettingUpsert(BaseSchema):
    """Create or replace a platform setting."""

    setting_value: Optional[str] = None
    description: Optional[str] = None


class SystemSettingResponse(BaseSchema):
    """Platform setting (secrets masked in lists)."""

    setting_key: str
    setting_value: Optional[str] = None
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


class JobResponse(BaseSchema):
    """Outbox job."""

    id: UUID
    type: str
    payload: dict[str, Any]
    status: JobStatus
    unique_scope: str
    attempts: int
    max_attempts: int
    last_error: Optional[str] = None
    run_after: datetime
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class JobFailure(BaseSchema):
    """Report a failed delivery attempt."""

    error: str
    dead_letter: bool = False
