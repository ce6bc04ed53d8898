"""Auth router - current user and first sign-in registration."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, get_current_user
from app.models.user import User
from app.schemas.business import MeResponse, UserRegister

router = APIRouter(prefix="/auth", tags=["auth"])


def _me(current_user: AuthenticatedUser) -> MeResponse:
    return MeResponse(
        uid=current_user.uid,
        email=current_user.email,
        user_id=current_user.db_user_id,
        business_id=current_user.business_id,
        business_role=current_user.business_role,
        is_super_admin=current_user.is_super_admin,
    )


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current authenticated user and business context."""
    return _me(current_user)


@router.post("/register", response_model=MeResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    data: UserRegister,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create the local user row for a verified Firebase account."""
    if current_user.db_user_id:
        return _me(current_user)
    if not current_user.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Firebase account has no e-mail address",
        )

    existing = await db.execute(select(User).where(User.email == current_user.email))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="E-mail already registered to another account",
        )

    user = User(
        firebase_uid=current_user.uid,
        email=current_user.email,
        full_name=data.full_name,
        phone=data.phone,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    current_user.db_user_id = user.id
    return _me(current_user)
