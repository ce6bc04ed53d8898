"""Rentline - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.core.env_validation import validate_environment
from app.core.errors import DomainError, LimitReached
from app.routers import (
    auth_router,
    businesses_router,
    properties_router,
    units_router,
    tenants_router,
    leases_router,
    payments_router,
    maintenance_router,
    listings_router,
    applications_router,
    public_apply_router,
    entitlements_router,
    addons_router,
    features_router,
    accounting_router,
    budgets_router,
    onboarding_router,
    templates_router,
    dashboard_router,
    super_admin_router,
    admin_affiliates_router,
    admin_ai_router,
    affiliates_router,
)

# Hard-fails (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"{settings.app_name} starting")
    yield
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant property management: properties, units, tenants, leases, rent, maintenance, listings, accounting and budgets.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# In production, wildcard (*) is blocked by env_validation.py
allowed_origins = settings.cors_origins
logger.info(f"CORS configured with origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def limit_reached_handler(request: Request, exc: LimitReached) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "resource": exc.resource.value,
            "current": exc.current,
            "limit": exc.limit,
        },
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.add_exception_handler(LimitReached, limit_reached_handler)
app.add_exception_handler(DomainError, domain_error_handler)

# API v1 routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(businesses_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(units_router, prefix=settings.api_v1_prefix)
app.include_router(tenants_router, prefix=settings.api_v1_prefix)
app.include_router(leases_router, prefix=settings.api_v1_prefix)
app.include_router(payments_router, prefix=settings.api_v1_prefix)
app.include_router(maintenance_router, prefix=settings.api_v1_prefix)
app.include_router(listings_router, prefix=settings.api_v1_prefix)
app.include_router(applications_router, prefix=settings.api_v1_prefix)
app.include_router(public_apply_router, prefix=settings.api_v1_prefix)  # Unauthenticated
app.include_router(entitlements_router, prefix=settings.api_v1_prefix)
app.include_router(addons_router, prefix=settings.api_v1_prefix)
app.include_router(features_router, prefix=settings.api_v1_prefix)
app.include_router(accounting_router, prefix=settings.api_v1_prefix)
app.include_router(budgets_router, prefix=settings.api_v1_prefix)
app.include_router(onboarding_router, prefix=settings.api_v1_prefix)
app.include_router(templates_router, prefix=settings.api_v1_prefix)
app.include_router(dashboard_router, prefix=settings.api_v1_prefix)
app.include_router(super_admin_router, prefix=settings.api_v1_prefix)
app.include_router(admin_affiliates_router, prefix=settings.api_v1_prefix)
app.include_router(admin_ai_router, prefix=settings.api_v1_prefix)
app.include_router(affiliates_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
