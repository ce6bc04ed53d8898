"""Onboarding state schemas."""

from typing import Optional
from uuid import UUID

from app.schemas.base import BaseSchema


class OnboardingStateResponse(BaseSchema):
    """Quick-start progress and what to show next."""

    step: str
    has_business: bool
    has_added_property: bool
    has_added_unit: bool
    first_property_id: Optional[UUID] = None
    first_unit_id: Optional[UUID] = None
    onboarding_dismissed: bool
    post_onboarding_dismissed: bool
    show_onboarding: bool
    show_post_onboarding: bool
