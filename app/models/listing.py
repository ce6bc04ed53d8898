"""Public listing and rental application models."""

import uuid
from datetime import datetime, date
from typing import Any, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Text, Integer, BigInteger, Boolean, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONType, enum_column
from app.models.enums import ListingStatus, ApplicationStatus


class Listing(Base):
    """Public advertisement for a vacant unit, separate from the unit record."""

    __tablename__ = "listings"

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
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ListingStatus] = mapped_column(
        enum_column(ListingStatus),
        default=ListingStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Public identifiers: slug for SEO pages, short code for /apply/{code}
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    listing_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False, index=True)

    available_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    lease_term_months: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Money (INTEGER CENTS)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    deposit_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    application_fee_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Numeric(4, 1, asdecimal=False), nullable=True)
    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    furnished: Mapped[bool] = mapped_column(Boolean, default=False)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    pet_policy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parking_spaces: Mapped[int] = mapped_column(Integer, default=0)

    amenities: Mapped[list[str]] = mapped_column(JSONType, default=list)
    utilities_included: Mapped[list[str]] = mapped_column(JSONType, default=list)
    photos: Mapped[list[str]] = mapped_column(JSONType, default=list)

    accept_applications: Mapped[bool] = mapped_column(Boolean, default=True)

    # Counters
    view_count: Mapped[int] = mapped_column(Integer, default=0)
    application_count: Mapped[int] = mapped_column(Integer, default=0)
    last_viewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class RentalApplication(Base):
    """An application submitted against a listing."""

    __tablename__ = "rental_applications"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    unit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="SET NULL"),
        nullable=True,
    )

    applicant_email: Mapped[str] = mapped_column(String(255), nullable=False)
    applicant_first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    applicant_last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    applicant_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Free-form answers to the application form
    responses: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    status: Mapped[ApplicationStatus] = mapped_column(
        enum_column(ApplicationStatus),
        default=ApplicationStatus.SUBMITTED,
        nullable=False,
        index=True,
    )

    landlord_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    landlord_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    reviewed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    converted_to_tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="SET NULL"),
        nullable=True,
    )
    converted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
