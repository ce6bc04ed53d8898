"""Maintenance request schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import MaintenancePriority, MaintenanceStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class MaintenanceCreate(BaseSchema):
    """Open a maintenance request."""

    unit_id: UUID
    tenant_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, max_length=100)
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    estimated_cost_cents: Optional[int] = Field(None, ge=0)


class MaintenanceUpdate(BaseSchema):
    """Update maintenance request."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    status: Optional[MaintenanceStatus] = None
    priority: Optional[MaintenancePriority] = None
    estimated_cost_cents: Optional[int] = Field(None, ge=0)
    actual_cost_cents: Optional[int] = Field(None, ge=0)


class MaintenanceComplete(BaseSchema):
    """Close a request."""

    actual_cost_cents: Optional[int] = Field(None, ge=0)


class MaintenanceResponse(BaseSchema, IDMixin, TimestampMixin):
    """Maintenance request response."""

    unit_id: UUID
    tenant_id: Optional[UUID] = None
    created_by_id: Optional[UUID] = None
    title: str
    description: str
    category: Optional[str] = None
    status: MaintenanceStatus
    priority: MaintenancePriority
    estimated_cost_cents: Optional[int] = None
    actual_cost_cents: Optional[int] = None
    completed_at: Optional[datetime] = None
