"""Rental applications: public submission, review and conversion to tenant."""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.models.enums import (
    ApplicationStatus,
    AuditAction,
    ListingStatus,
    TenantStatus,
    TenantType,
)
from app.models.listing import Listing, RentalApplication
from app.models.tenant import Tenant
from app.services.audit import AuditService
from app.services.tenant import TenantService

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ApplicationStatus.SUBMITTED, ApplicationStatus.REVIEWING)


class RentalApplicationService:
    """Application workflow for a business's listings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit_application(self, code: str, data: dict[str, Any]) -> RentalApplication:
        """Public submission against an active listing that accepts applications."""
        result = await self.db.execute(
            select(Listing).where(Listing.listing_code == code.upper())
        )
        listing = result.scalar_one_or_none()
        if not listing or listing.status != ListingStatus.ACTIVE:
            raise NotFoundError("Listing")
        if not listing.accept_applications:
            raise InvalidStateError("This listing is not accepting applications")

        application = RentalApplication(
            listing_id=listing.id,
            business_id=listing.business_id,
            property_id=listing.property_id,
            unit_id=listing.unit_id,
            status=ApplicationStatus.SUBMITTED,
            submitted_at=datetime.utcnow(),
            **data,
        )
        self.db.add(application)
        listing.application_count = (listing.application_count or 0) + 1
        await self.db.flush()
        return application

    async def get_application(self, business_id: UUID, application_id: UUID) -> RentalApplication:
        result = await self.db.execute(
            select(RentalApplication).where(
                RentalApplication.id == application_id,
                RentalApplication.business_id == business_id,
            )
        )
        application = result.scalar_one_or_none()
        if not application:
            raise NotFoundError("Application")
        return application

    async def list_applications(
        self,
        business_id: UUID,
        listing_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> list[RentalApplication]:
        query = select(RentalApplication).where(RentalApplication.business_id == business_id)
        if listing_id:
            query = query.where(RentalApplication.listing_id == listing_id)
        if status:
            query = query.where(RentalApplication.status == status)
        result = await self.db.execute(query.order_by(RentalApplication.submitted_at.desc()))
        return list(result.scalars().all())

    async def review_application(
        self,
        business_id: UUID,
        application_id: UUID,
        reviewer_id: Optional[UUID],
        rating: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> RentalApplication:
        application = await self.get_application(business_id, application_id)
        if application.status not in OPEN_STATUSES:
            raise InvalidStateError(
                f"Cannot review an application with status {application.status.value}"
            )
        application.status = ApplicationStatus.REVIEWING
        application.reviewed_at = datetime.utcnow()
        application.reviewed_by_id = reviewer_id
        if rating is not None:
            application.landlord_rating = rating
        if notes is not None:
            application.landlord_notes = notes
        await self.db.flush()
        return application

    async def approve_application(
        self, business_id: UUID, application_id: UUID, reviewer_id: Optional[UUID] = None
    ) -> RentalApplication:
        application = await self.get_application(business_id, application_id)
        if application.status not in OPEN_STATUSES:
            raise InvalidStateError(
                f"Cannot approve an application with status {application.status.value}"
            )
        application.status = ApplicationStatus.APPROVED
        application.approved_at = datetime.utcnow()
        application.reviewed_by_id = reviewer_id or application.reviewed_by_id
        await self.db.flush()
        return application

    async def reject_application(
        self,
        business_id: UUID,
        application_id: UUID,
        reason: Optional[str] = None,
        reviewer_id: Optional[UUID] = None,
    ) -> RentalApplication:
        application = await self.get_application(business_id, application_id)
        if application.status not in OPEN_STATUSES:
            raise InvalidStateError(
                f"Cannot reject an application with status {application.status.value}"
            )
        application.status = ApplicationStatus.REJECTED
        application.rejected_at = datetime.utcnow()
        application.rejection_reason = reason
        application.reviewed_by_id = reviewer_id or application.reviewed_by_id
        await self.db.flush()
        return application

    async def approve_and_convert_to_tenant(
        self,
        business_id: UUID,
        application_id: UUID,
        lease: dict[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> tuple[RentalApplication, Tenant]:
        """Approve the application and create a tenant from the applicant.

        The tenant limit is checked by the tenant service before anything is
        written for the conversion.
        """
        application = await self.get_application(business_id, application_id)
        if application.converted_to_tenant_id:
            raise InvalidStateError("Application has already been converted")
        if application.status not in (*OPEN_STATUSES, ApplicationStatus.APPROVED):
            raise InvalidStateError(
                f"Cannot convert an application with status {application.status.value}"
            )

        unit_id = lease.get("unit_id") or application.unit_id
        if not unit_id:
            raise DomainError("A unit is required to convert an application")

        tenant = await TenantService(self.db).create_tenant(
            business_id,
            {
                "unit_id": unit_id,
                "first_name": application.applicant_first_name,
                "last_name": application.applicant_last_name,
                "email": application.applicant_email,
                "phone": application.applicant_phone,
                "tenant_type": TenantType.PRIMARY,
                "status": TenantStatus.ACTIVE,
                "lease_start_date": lease.get("lease_start_date"),
                "lease_end_date": lease.get("lease_end_date"),
                "monthly_rent_cents": lease.get("monthly_rent_cents"),
                "security_deposit_paid_cents": lease.get("security_deposit_paid_cents") or 0,
                "move_in_date": lease.get("move_in_date"),
            },
            actor_id=actor_id,
        )

        now = datetime.utcnow()
        if application.status != ApplicationStatus.APPROVED:
            application.status = ApplicationStatus.APPROVED
            application.approved_at = now
        application.converted_to_tenant_id = tenant.id
        application.converted_at = now
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.APPLICATION_CONVERTED,
            resource_type="rental_application",
            resource_id=application.id,
            business_id=business_id,
            user_id=actor_id,
            details={"tenant_id": str(tenant.id)},
        )
        logger.info(f"[APPLICATIONS] Application {application.id} converted to tenant {tenant.id}")
        return application, tenant
