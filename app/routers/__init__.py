"""API Routers for Rentline."""

from app.routers.auth import router as auth_router
from app.routers.businesses import router as businesses_router
from app.routers.properties import router as properties_router
from app.routers.units import router as units_router
from app.routers.tenants import router as tenants_router
from app.routers.leases import router as leases_router
from app.routers.payments import router as payments_router
from app.routers.maintenance import router as maintenance_router
from app.routers.listings import router as listings_router
from app.routers.listings import applications_router
from app.routers.listings import public_router as public_apply_router
from app.routers.entitlements import router as entitlements_router
from app.routers.addons import router as addons_router
from app.routers.features import router as features_router
from app.routers.accounting import router as accounting_router
from app.routers.budgets import router as budgets_router
from app.routers.onboarding import router as onboarding_router
from app.routers.templates import router as templates_router
from app.routers.dashboard import router as dashboard_router
from app.routers.super_admin import router as super_admin_router
from app.routers.admin_affiliates import router as admin_affiliates_router
from app.routers.admin_ai import router as admin_ai_router
from app.routers.affiliates import router as affiliates_router

__all__ = [
    "auth_router",
    "businesses_router",
    "properties_router",
    "units_router",
    "tenants_router",
    "leases_router",
    "payments_router",
    "maintenance_router",
    "listings_router",
    "applications_router",
    "public_apply_router",
    "entitlements_router",
    "addons_router",
    "features_router",
    "accounting_router",
    "budgets_router",
    "onboarding_router",
    "templates_router",
    "dashboard_router",
    "super_admin_router",
    "admin_affiliates_router",
    "admin_ai_router",
    "affiliates_router",
]
