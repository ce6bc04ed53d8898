"""Tenant (renter) model."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Text, BigInteger, Boolean, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, enum_column
from app.models.enums import TenantType, TenantStatus

if TYPE_CHECKING:
    from app.models.property import Unit


class Tenant(Base):
    """A renter occupying (or applying for) a unit."""

    __tablename__ = "tenants"

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
    # Portal login, once the tenant accepts an invitation
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    emergency_contact_relationship: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    employer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    employer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    monthly_income_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    tenant_type: Mapped[TenantType] = mapped_column(
        enum_column(TenantType),
        default=TenantType.PRIMARY,
        nullable=False,
    )

    lease_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    lease_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    monthly_rent_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    security_deposit_paid_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    move_in_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    move_out_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    has_portal_access: Mapped[bool] = mapped_column(Boolean, default=True)
    portal_invite_sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    portal_last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    status: Mapped[TenantStatus] = mapped_column(
        enum_column(TenantStatus),
        default=TenantStatus.ACTIVE,
        nullable=False,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    unit: Mapped["Unit"] = relationship("Unit", back_populates="tenants")
