"""Business (tenancy root) and membership service."""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    InvalidStateError,
    LimitedResource,
    NotFoundError,
    PermissionDeniedError,
)
from app.models.business import Business, BusinessMembership
from app.models.enums import AuditAction, BusinessRole
from app.models.package import BusinessPackageSettings, PackageTier
from app.models.user import User
from app.services.audit import AuditService
from app.services.entitlements import EntitlementService

logger = logging.getLogger(__name__)


class BusinessService:
    """Creates businesses and manages their members."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.entitlements = EntitlementService(db)
        self.audit = AuditService(db)

    async def default_tier(self) -> Optional[PackageTier]:
        """The active tier with the lowest display order."""
        result = await self.db.execute(
            select(PackageTier)
            .where(PackageTier.is_active == True)  # noqa: E712
            .order_by(PackageTier.display_order, PackageTier.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_business(
        self,
        user_id: UUID,
        data: dict[str, Any],
        current_business_id: Optional[UUID] = None,
    ) -> Business:
        """Create a business owned by ``user_id``.

        A user who already owns a business is held to the business limit of
        their current business. The first business is always allowed.
        """
        if current_business_id is not None:
            await self.entitlements.ensure_capacity(
                current_business_id, LimitedResource.BUSINESS
            )

        business = Business(**data)
        self.db.add(business)
        await self.db.flush()

        self.db.add(
            BusinessMembership(
                business_id=business.id,
                user_id=user_id,
                role=BusinessRole.OWNER,
            )
        )

        tier = await self.default_tier()
        self.db.add(
            BusinessPackageSettings(
                business_id=business.id,
                package_tier_id=tier.id if tier else None,
            )
        )
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.BUSINESS_CREATED,
            resource_type="business",
            resource_id=business.id,
            business_id=business.id,
            user_id=user_id,
            details={"business_name": business.business_name},
        )
        logger.info(f"[BUSINESS] Business {business.id} created by user {user_id}")
        return business

    async def get_business(self, business_id: UUID) -> Business:
        business = await self.db.get(Business, business_id)
        if not business:
            raise NotFoundError("Business")
        return business

    async def update_business(self, business_id: UUID, data: dict[str, Any]) -> Business:
        business = await self.get_business(business_id)
        for field, value in data.items():
            setattr(business, field, value)
        await self.db.flush()
        return business

    async def list_user_businesses(self, user_id: UUID) -> list[tuple[Business, BusinessRole]]:
        """Businesses the user belongs to, with their role in each."""
        result = await self.db.execute(
            select(Business, BusinessMembership.role)
            .join(BusinessMembership, BusinessMembership.business_id == Business.id)
            .where(BusinessMembership.user_id == user_id)
            .order_by(BusinessMembership.created_at)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def list_members(self, business_id: UUID) -> list[dict]:
        result = await self.db.execute(
            select(BusinessMembership, User)
            .join(User, BusinessMembership.user_id == User.id)
            .where(BusinessMembership.business_id == business_id)
            .order_by(BusinessMembership.created_at)
        )
        return [
            {
                "membership_id": membership.id,
                "user_id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "role": membership.role,
            }
            for membership, user in result.all()
        ]

    async def add_member(
        self,
        business_id: UUID,
        email: str,
        role: BusinessRole,
        actor_id: Optional[UUID] = None,
    ) -> BusinessMembership:
        """Add an existing user by e-mail. Checks the team member limit."""
        if role == BusinessRole.OWNER:
            raise PermissionDeniedError("A business can only have one owner")

        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User")

        existing = await self.db.execute(
            select(BusinessMembership).where(
                BusinessMembership.business_id == business_id,
                BusinessMembership.user_id == user.id,
            )
        )
        if existing.scalar_one_or_none():
            raise InvalidStateError("User is already a member of this business")

        await self.entitlements.ensure_capacity(business_id, LimitedResource.TEAM_MEMBER)

        membership = BusinessMembership(business_id=business_id, user_id=user.id, role=role)
        self.db.add(membership)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.MEMBER_ADDED,
            resource_type="business_membership",
            resource_id=membership.id,
            business_id=business_id,
            user_id=actor_id,
            details={"email": user.email, "role": role.value},
        )
        return membership

    async def remove_member(
        self,
        business_id: UUID,
        membership_id: UUID,
        actor_id: Optional[UUID] = None,
    ) -> None:
        result = await self.db.execute(
            select(BusinessMembership).where(
                BusinessMembership.id == membership_id,
                BusinessMembership.business_id == business_id,
            )
        )
        membership = result.scalar_one_or_none()
        if not membership:
            raise NotFoundError("Member")
        if membership.role == BusinessRole.OWNER:
            raise PermissionDeniedError("The business owner cannot be removed")

        await self.db.delete(membership)
        await self.audit.log(
            action=AuditAction.MEMBER_REMOVED,
            resource_type="business_membership",
            resource_id=membership_id,
            business_id=business_id,
            user_id=actor_id,
        )
        await self.db.flush()
