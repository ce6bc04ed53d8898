"""Per-user onboarding progress."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Boolean, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class OnboardingState(Base):
    """Persisted quick-start progress for a user."""

    __tablename__ = "onboarding_state"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    has_added_property: Mapped[bool] = mapped_column(Boolean, default=False)
    has_added_unit: Mapped[bool] = mapped_column(Boolean, default=False)
    first_property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    first_unit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="SET NULL"),
        nullable=True,
    )
    onboarding_dismissed: Mapped[bool] = mapped_column(Boolean, default=False)
    post_onboarding_dismissed: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
