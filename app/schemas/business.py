"""Business, membership and current-user schemas."""

from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import BusinessRole, BusinessStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class BusinessCreate(BaseSchema):
    """Create a business; the caller becomes its owner."""

    business_name: str = Field(..., min_length=2, max_length=255)
    legal_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    currency_code: str = Field("CAD", min_length=3, max_length=3)
    timezone: str = "America/Toronto"
    # Click id from an affiliate referral link
    referral_click_id: Optional[str] = Field(None, max_length=100)


class BusinessUpdate(BaseSchema):
    """Update business profile."""

    business_name: Optional[str] = Field(None, min_length=2, max_length=255)
    legal_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None


class BusinessResponse(BaseSchema, IDMixin, TimestampMixin):
    """Business response."""

    business_name: str
    legal_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    currency_code: str
    timezone: str
    status: BusinessStatus


class MyBusinessResponse(BusinessResponse):
    """A business together with the caller's role in it."""

    role: BusinessRole


class MemberAdd(BaseSchema):
    """Add an existing user to the business."""

    email: EmailStr
    role: BusinessRole = BusinessRole.MEMBER


class MemberResponse(BaseSchema):
    """Business member."""

    membership_id: UUID
    user_id: UUID
    email: str
    full_name: Optional[str] = None
    role: BusinessRole


class MeResponse(BaseSchema):
    """The authenticated caller and their current business context."""

    uid: str
    email: Optional[str] = None
    user_id: Optional[UUID] = None
    business_id: Optional[UUID] = None
    business_role: Optional[str] = None
    is_super_admin: bool = False


class UserRegister(BaseSchema):
    """First sign-in: create the local user row for a Firebase account."""

    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
