"""Services for Rentline."""

from app.services.audit import AuditService
from app.services.jobs import JobsService
from app.services.entitlements import EntitlementService
from app.services.onboarding import OnboardingService
from app.services.business import BusinessService
from app.services.property import PropertyService
from app.services.unit import UnitService
from app.services.tenant import TenantService
from app.services.lease import LeaseService
from app.services.payment import PaymentService
from app.services.maintenance import MaintenanceService
from app.services.listing import ListingService
from app.services.rental_application import RentalApplicationService
from app.services.package_tier import PackageTierService
from app.services.feature import FeatureService
from app.services.addon import AddonService
from app.services.accounting import AccountingService
from app.services.budget import BudgetService
from app.services.super_admin import SuperAdminService
from app.services.square_payment import SquarePaymentService
from app.services.affiliate import AffiliateService
from app.services.affiliate_admin import AffiliateAdminService
from app.services.ai_api_key import AIApiKeyService

__all__ = [
    "AuditService",
    "JobsService",
    "EntitlementService",
    "OnboardingService",
    "BusinessService",
    "PropertyService",
    "UnitService",
    "TenantService",
    "LeaseService",
    "PaymentService",
    "MaintenanceService",
    "ListingService",
    "RentalApplicationService",
    "PackageTierService",
    "FeatureService",
    "AddonService",
    "AccountingService",
    "BudgetService",
    "SuperAdminService",
    "SquarePaymentService",
    "AffiliateService",
    "AffiliateAdminService",
    "AIApiKeyService",
]
