"""Onboarding router - quick-start progress for the current user."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_registered_user
from app.schemas.onboarding import OnboardingStateResponse
from app.services.onboarding import OnboardingService

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("", response_model=OnboardingStateResponse)
async def get_onboarding_state(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    """Current step and which guide to show."""
    state = await OnboardingService(db).describe(current_user.db_user_id)
    await db.commit()
    return OnboardingStateResponse(**state)


@router.post("/dismiss", response_model=OnboardingStateResponse)
async def dismiss_onboarding(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    """Hide the quick-start wizard."""
    service = OnboardingService(db)
    await service.dismiss(current_user.db_user_id)
    state = await service.describe(current_user.db_user_id)
    await db.commit()
    return OnboardingStateResponse(**state)


@router.post("/post/dismiss", response_model=OnboardingStateResponse)
async def dismiss_post_onboarding(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    """Hide the post-onboarding guide."""
    service = OnboardingService(db)
    await service.dismiss_post_onboarding(current_user.db_user_id)
    state = await service.describe(current_user.db_user_id)
    await db.commit()
    return OnboardingStateResponse(**state)
