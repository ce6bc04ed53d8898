"""Super-admin AI provider keys, model catalog, usage and feature routing."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_super_admin
from app.schemas.ai import (
    AIApiKeyCreate,
    AIApiKeyResponse,
    AIApiKeyUpdate,
    AIProviderResponse,
    AIUsageCreate,
    AIUsageResponse,
    AIUsageSummary,
    FeatureMappingResponse,
    FeatureMappingUpdate,
)
from app.services.ai_api_key import AIApiKeyService

router = APIRouter(prefix="/super-admin/ai", tags=["super-admin"])


def get_ai_key_service(db: AsyncSession = Depends(get_db)) -> AIApiKeyService:
    return AIApiKeyService(db)


# === Keys ===

@router.get("/keys", response_model=List[AIApiKeyResponse])
async def list_keys(
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    keys = await service.list_keys()
    return [AIApiKeyResponse.model_validate(k) for k in keys]


@router.post("/keys", response_model=AIApiKeyResponse, status_code=status.HTTP_201_CREATED)
async def create_key(
    data: AIApiKeyCreate,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Register a key; the provider is detected from its prefix when omitted."""
    key = await service.create_key(data.model_dump(), current_user.db_user_id)
    await db.commit()
    await db.refresh(key)
    return AIApiKeyResponse.model_validate(key)


@router.patch("/keys/{key_id}", response_model=AIApiKeyResponse)
async def update_key(
    key_id: UUID,
    data: AIApiKeyUpdate,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    key = await service.update_key(key_id, data.model_dump(exclude_unset=True))
    await db.commit()
    await db.refresh(key)
    return AIApiKeyResponse.model_validate(key)


@router.delete("/keys/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_key(
    key_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    await service.delete_key(key_id)
    await db.commit()


@router.post("/keys/{key_id}/verify", response_model=AIApiKeyResponse)
async def verify_key(
    key_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    """Check the key against its provider and store the outcome."""
    key = await service.verify_api_key(key_id)
    await db.commit()
    await db.refresh(key)
    return AIApiKeyResponse.model_validate(key)


# === Catalog ===

@router.get("/providers", response_model=List[AIProviderResponse])
async def list_providers(
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    providers = await service.list_providers()
    return [AIProviderResponse.model_validate(p) for p in providers]


# === Usage ===

@router.post("/usage", response_model=AIUsageResponse, status_code=status.HTTP_201_CREATED)
async def log_usage(
    data: AIUsageCreate,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    entry = await service.log_usage(data.model_dump())
    await db.commit()
    await db.refresh(entry)
    return AIUsageResponse.model_validate(entry)


@router.get("/usage", response_model=AIUsageSummary)
async def get_usage_summary(
    days: int = Query(default=30, ge=1, le=365),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    return AIUsageSummary(**await service.get_usage_summary(days))


# === Feature routing ===

@router.get("/mappings", response_model=List[FeatureMappingResponse])
async def list_mappings(
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    mappings = await service.list_feature_mappings()
    return [FeatureMappingResponse.model_validate(m) for m in mappings]


@router.put("/mappings/{feature_name}", response_model=FeatureMappingResponse)
async def update_mapping(
    feature_name: str,
    data: FeatureMappingUpdate,
    db: AsyncSession = Depends(get_db),
    service: AIApiKeyService = Depends(get_ai_key_service),
    current_user: AuthenticatedUser = Depends(require_super_admin),
):
    mapping = await service.update_feature_mapping(feature_name, data.model_dump())
    await db.commit()
    await db.refresh(mapping)
    return FeatureMappingResponse.model_validate(mapping)
