"""Lease model."""

import uuid
from datetime import datetime, date
from typing import Optional

from sqlalchemy import DateTime, Date, ForeignKey, Text, BigInteger, Integer, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, enum_column
from app.models.enums import LeaseStatus, LeaseType


class Lease(Base):
    """A lease agreement for a unit."""

    __tablename__ = "leases"

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

    lease_type: Mapped[LeaseType] = mapped_column(
        enum_column(LeaseType),
        default=LeaseType.FIXED_TERM,
        nullable=False,
    )
    status: Mapped[LeaseStatus] = mapped_column(
        enum_column(LeaseStatus),
        default=LeaseStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Dates (end_date empty for month-to-month)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Money (ALL INTEGER CENTS - BIGINT)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    security_deposit_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    rent_due_day: Mapped[int] = mapped_column(Integer, default=1)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    activated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    terminated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "rent_due_day >= 1 AND rent_due_day <= 28",
            name="ck_lease_rent_due_day_range",
        ),
    )
