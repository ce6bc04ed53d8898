"""Business router - create, profile, members."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import (
    AuthenticatedUser,
    get_current_user,
    require_business_admin,
    require_business_member,
    require_registered_user,
)
from app.models.user import User
from app.schemas.business import (
    BusinessCreate,
    BusinessResponse,
    BusinessUpdate,
    MemberAdd,
    MemberResponse,
    MyBusinessResponse,
)
from app.services.affiliate import AffiliateService
from app.services.business import BusinessService

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    data: BusinessCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a business. Creator becomes OWNER."""
    user_id = current_user.db_user_id
    if not user_id:
        # First sign-in straight into onboarding
        result = await db.execute(select(User).where(User.firebase_uid == current_user.uid))
        user = result.scalar_one_or_none()
        if not user:
            user = User(
                firebase_uid=current_user.uid,
                email=current_user.email or "",
                full_name=current_user.claims.get("name"),
            )
            db.add(user)
            await db.flush()
        user_id = user.id

    business = await BusinessService(db).create_business(
        user_id,
        data.model_dump(exclude={"referral_click_id"}),
        current_business_id=current_user.business_id,
    )
    if data.referral_click_id:
        await AffiliateService(db).track_signup(data.referral_click_id, user_id, business.id)
    await db.commit()
    await db.refresh(business)
    return BusinessResponse.model_validate(business)


@router.get("/mine", response_model=List[MyBusinessResponse])
async def list_my_businesses(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered_user),
):
    """Businesses the caller belongs to, with their role."""
    rows = await BusinessService(db).list_user_businesses(current_user.db_user_id)
    return [
        MyBusinessResponse(**BusinessResponse.model_validate(business).model_dump(), role=role)
        for business, role in rows
    ]


@router.get("/current", response_model=BusinessResponse)
async def get_my_business(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """The business selected for this request."""
    business = await BusinessService(db).get_business(current_user.business_id)
    return BusinessResponse.model_validate(business)


@router.patch("/current", response_model=BusinessResponse)
async def update_my_business(
    data: BusinessUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Update business profile (admin only)."""
    business = await BusinessService(db).update_business(
        current_user.business_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(business)
    return BusinessResponse.model_validate(business)


@router.get("/current/members", response_model=List[MemberResponse])
async def list_members(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List business members."""
    members = await BusinessService(db).list_members(current_user.business_id)
    return [MemberResponse(**member) for member in members]


@router.post(
    "/current/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    data: MemberAdd,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Add an existing user as a team member (admin only)."""
    service = BusinessService(db)
    membership = await service.add_member(
        current_user.business_id,
        data.email,
        data.role,
        actor_id=current_user.db_user_id,
    )
    await db.commit()
    members = await service.list_members(current_user.business_id)
    return next(
        MemberResponse(**member)
        for member in members
        if member["membership_id"] == membership.id
    )


@router.delete("/current/members/{membership_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    membership_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Remove a team member (admin only)."""
    await BusinessService(db).remove_member(
        current_user.business_id, membership_id, actor_id=current_user.db_user_id
    )
    await db.commit()
