"""SQLAlchemy models for Rentline."""

from app.models.user import User
from app.models.business import Business, BusinessMembership
from app.models.property import Property, Unit
from app.models.tenant import Tenant
from app.models.lease import Lease
from app.models.payment import RentPayment, SystemSetting
from app.models.maintenance import MaintenanceRequest
from app.models.listing import Listing, RentalApplication
from app.models.package import (
    PackageTier,
    BusinessPackageSettings,
    Feature,
    TierFeature,
    TierAddon,
    AddonProduct,
    AddonPurchase,
)
from app.models.accounting import GLAccount, GLLedgerEntry, Budget, BudgetItem
from app.models.affiliate import (
    AffiliateSettings,
    Affiliate,
    AffiliateReferral,
    AffiliatePayout,
    AffiliateCommission,
)
from app.models.ai import AIApiKey, AILLMProvider, AIUsageLog, AIFeatureLLMMapping
from app.models.onboarding import OnboardingState
from app.models.audit import AuditLog
from app.models.jobs import JobsOutbox

__all__ = [
    "User",
    "Business",
    "BusinessMembership",
    "Property",
    "Unit",
    "Tenant",
    "Lease",
    "RentPayment",
    "SystemSetting",
    "MaintenanceRequest",
    "Listing",
    "RentalApplication",
    "PackageTier",
    "BusinessPackageSettings",
    "Feature",
    "TierFeature",
    "TierAddon",
    "AddonProduct",
    "AddonPurchase",
    "GLAccount",
    "GLLedgerEntry",
    "Budget",
    "BudgetItem",
    "AffiliateSettings",
    "Affiliate",
    "AffiliateReferral",
    "AffiliatePayout",
    "AffiliateCommission",
    "AIApiKey",
    "AILLMProvider",
    "AIUsageLog",
    "AIFeatureLLMMapping",
    "OnboardingState",
    "AuditLog",
    "JobsOutbox",
]
