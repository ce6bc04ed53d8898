"""Business (tenancy root) and membership models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, ForeignKey, Text, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, enum_column
from app.models.enums import BusinessRole, BusinessStatus

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property
    from app.models.package import BusinessPackageSettings


class Business(Base):
    """A landlord business. Every tenant-owned record hangs off a business."""

    __tablename__ = "businesses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Contact info
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Settings
    currency_code: Mapped[str] = mapped_column(String(3), default="CAD")
    timezone: Mapped[str] = mapped_column(String(50), default="America/Toronto")

    status: Mapped[BusinessStatus] = mapped_column(
        enum_column(BusinessStatus),
        default=BusinessStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    memberships: Mapped[list["BusinessMembership"]] = relationship(
        "BusinessMembership", back_populates="business", cascade="all, delete-orphan"
    )
    properties: Mapped[list["Property"]] = relationship(
        "Property", back_populates="business", cascade="all, delete-orphan"
    )
    package_settings: Mapped[Optional["BusinessPackageSettings"]] = relationship(
        "BusinessPackageSettings", back_populates="business", uselist=False,
        cascade="all, delete-orphan",
    )


class BusinessMembership(Base):
    """User membership in a business with role."""

    __tablename__ = "business_memberships"

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
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[BusinessRole] = mapped_column(
        enum_column(BusinessRole),
        default=BusinessRole.MEMBER,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    business: Mapped["Business"] = relationship("Business", back_populates="memberships")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("business_id", "user_id", name="uq_business_membership"),
    )
