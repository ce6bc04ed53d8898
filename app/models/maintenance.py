"""MaintenanceRequest model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, BigInteger, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, enum_column
from app.models.enums import MaintenancePriority, MaintenanceStatus


class MaintenanceRequest(Base):
    """A maintenance request raised against a unit."""

    __tablename__ = "maintenance_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    status: Mapped[MaintenanceStatus] = mapped_column(
        enum_column(MaintenanceStatus),
        default=MaintenanceStatus.OPEN,
        nullable=False,
        index=True,
    )
    priority: Mapped[MaintenancePriority] = mapped_column(
        enum_column(MaintenancePriority),
        default=MaintenancePriority.MEDIUM,
        nullable=False,
    )

    # Cost (INTEGER CENTS)
    estimated_cost_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    actual_cost_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
