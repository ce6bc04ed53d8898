"""Quick-start onboarding state machine.

Steps only move forward: BUSINESS -> PROPERTY -> UNIT -> DONE.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidStateError
from app.models.business import BusinessMembership
from app.models.onboarding import OnboardingState


class OnboardingStep(str, Enum):
    """Next thing the user needs to set up."""
    BUSINESS = "business"
    PROPERTY = "property"
    UNIT = "unit"
    DONE = "done"


def current_step(has_business: bool, state: OnboardingState) -> OnboardingStep:
    """Derive the step from persisted progress."""
    if not has_business:
        return OnboardingStep.BUSINESS
    if not state.has_added_property:
        return OnboardingStep.PROPERTY
    if not state.has_added_unit:
        return OnboardingStep.UNIT
    return OnboardingStep.DONE


class OnboardingService:
    """Reads and advances a user's onboarding state."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_state(self, user_id: UUID) -> OnboardingState:
        """Return the user's state, creating it on first access."""
        result = await self.db.execute(
            select(OnboardingState).where(OnboardingState.user_id == user_id)
        )
        state = result.scalar_one_or_none()
        if state is None:
            state = OnboardingState(
                user_id=user_id,
                has_added_property=False,
                has_added_unit=False,
                onboarding_dismissed=False,
                post_onboarding_dismissed=False,
            )
            self.db.add(state)
            await self.db.flush()
        return state

    async def has_business(self, user_id: UUID) -> bool:
        result = await self.db.execute(
            select(func.count(BusinessMembership.id)).where(
                BusinessMembership.user_id == user_id
            )
        )
        return (result.scalar() or 0) > 0

    async def get_step(self, user_id: UUID) -> OnboardingStep:
        state = await self.get_state(user_id)
        return current_step(await self.has_business(user_id), state)

    async def mark_property_added(self, user_id: UUID, property_id: UUID) -> OnboardingState:
        """Record the first property. Later properties leave the state alone."""
        state = await self.get_state(user_id)
        if not state.has_added_property:
            state.has_added_property = True
            state.first_property_id = property_id
            await self.db.flush()
        return state

    async def mark_unit_added(self, user_id: UUID, unit_id: UUID) -> OnboardingState:
        """Record the first unit; a property must have been added first."""
        state = await self.get_state(user_id)
        if not state.has_added_property:
            raise InvalidStateError("Add a property before adding a unit")
        if not state.has_added_unit:
            state.has_added_unit = True
            state.first_unit_id = unit_id
            await self.db.flush()
        return state

    async def record_unit_created(
        self, user_id: UUID, property_id: UUID, unit_id: UUID
    ) -> OnboardingState:
        """Advance through both steps when a unit is created directly."""
        await self.mark_property_added(user_id, property_id)
        return await self.mark_unit_added(user_id, unit_id)

    async def dismiss(self, user_id: UUID) -> OnboardingState:
        state = await self.get_state(user_id)
        state.onboarding_dismissed = True
        await self.db.flush()
        return state

    async def dismiss_post_onboarding(self, user_id: UUID) -> OnboardingState:
        state = await self.get_state(user_id)
        state.post_onboarding_dismissed = True
        await self.db.flush()
        return state

    async def should_show_onboarding(self, user_id: UUID) -> bool:
        state = await self.get_state(user_id)
        step = current_step(await self.has_business(user_id), state)
        return not state.onboarding_dismissed and step != OnboardingStep.DONE

    async def should_show_post_onboarding(self, user_id: UUID) -> bool:
        state = await self.get_state(user_id)
        step = current_step(await self.has_business(user_id), state)
        return step == OnboardingStep.DONE and not state.post_onboarding_dismissed

    async def describe(self, user_id: UUID) -> dict:
        """Full state payload for the API."""
        state = await self.get_state(user_id)
        has_business = await self.has_business(user_id)
        step = current_step(has_business, state)
        return {
            "step": step.value,
            "has_business": has_business,
            "has_added_property": state.has_added_property,
            "has_added_unit": state.has_added_unit,
            "first_property_id": state.first_property_id,
            "first_unit_id": state.first_unit_id,
            "onboarding_dismissed": state.onboarding_dismissed,
            "post_onboarding_dismissed": state.post_onboarding_dismissed,
            "show_onboarding": not state.onboarding_dismissed and step != OnboardingStep.DONE,
            "show_post_onboarding": step == OnboardingStep.DONE
            and not state.post_onboarding_dismissed,
        }
