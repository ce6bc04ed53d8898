"""Property and Unit models."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Text, Integer, BigInteger, Boolean, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, JSONType, enum_column
from app.models.enums import PropertyType, OccupancyStatus

if TYPE_CHECKING:
    from app.models.business import Business
    from app.models.tenant import Tenant


class Property(Base):
    """A property (building, house, lot) managed by a business."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(
        enum_column(PropertyType),
        default=PropertyType.RESIDENTIAL,
        nullable=False,
    )

    # Address
    address_line1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(50), default="CA")

    # Building facts
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    lot_size: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Numeric(4, 1, asdecimal=False), nullable=True)

    # Money (ALL INTEGER CENTS - BIGINT)
    purchase_price_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    purchase_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    current_value_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Public page
    public_page_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    public_page_slug: Mapped[Optional[str]] = mapped_column(String(120), unique=True, nullable=True)
    accept_online_applications: Mapped[bool] = mapped_column(Boolean, default=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    business: Mapped["Business"] = relationship("Business", back_populates="properties")
    units: Mapped[list["Unit"]] = relationship(
        "Unit", back_populates="property", cascade="all, delete-orphan"
    )


class Unit(Base):
    """A rentable unit within a property."""

    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    unit_number: Mapped[str] = mapped_column(String(50), nullable=False)
    unit_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Unit details
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Numeric(4, 1, asdecimal=False), nullable=True)
    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    floor_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Money (ALL INTEGER CENTS - BIGINT)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    security_deposit_cents: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    # {"water": true, "heating": false, ...}
    utilities_included: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    amenities: Mapped[list[str]] = mapped_column(JSONType, default=list)

    occupancy_status: Mapped[OccupancyStatus] = mapped_column(
        enum_column(OccupancyStatus),
        default=OccupancyStatus.VACANT,
        nullable=False,
        index=True,
    )
    available_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="units")
    tenants: Mapped[list["Tenant"]] = relationship(
        "Tenant", back_populates="unit", cascade="all, delete-orphan"
    )
