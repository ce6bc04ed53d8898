"""AI provider key, catalog and usage schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import KeyVerificationStatus
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


class AIApiKeyCreate(BaseSchema):
    """Register a provider API key."""

    key_name: str = Field(..., min_length=1, max_length=255)
    provider_name: Optional[str] = Field(None, max_length=50)
    api_key: str = Field(..., min_length=8)
    supported_models: list[str] = Field(default_factory=list)
    is_active: bool = True
    monthly_limit_cents: Optional[int] = Field(None, ge=0)


class AIApiKeyUpdate(BaseSchema):
    """Update a provider API key."""

    key_name: Optional[str] = Field(None, min_length=1, max_length=255)
    provider_name: Optional[str] = Field(None, max_length=50)
    api_key: Optional[str] = Field(None, min_length=8)
    supported_models: Optional[list[str]] = None
    is_active: Optional[bool] = None
    monthly_limit_cents: Optional[int] = Field(None, ge=0)


class AIApiKeyResponse(BaseSchema, IDMixin, TimestampMixin):
    """Key metadata; the secret itself is never returned."""

    key_name: str
    provider_name: str
    provider_display_name: Optional[str] = None
    key_preview: str
    supported_models: list[str] = Field(default_factory=list)
    is_active: bool
    verification_status: KeyVerificationStatus
    last_verified_at: Optional[datetime] = None
    total_spent_cents: int
    monthly_limit_cents: Optional[int] = None


class AIProviderResponse(BaseSchema, IDMixin):
    """Catalog model entry."""

    provider_name: str
    model_name: str
    display_name: str
    input_cost_per_mtok_cents: int
    output_cost_per_mtok_cents: int
    context_window: Optional[int] = None
    is_active: bool


class AIUsageCreate(BaseSchema):
    """Record one LLM call."""

    api_key_id: Optional[UUID] = None
    business_id: Optional[UUID] = None
    feature_name: str = Field(..., min_length=1, max_length=100)
    provider_name: str = Field(..., min_length=1, max_length=50)
    model_name: str = Field(..., min_length=1, max_length=100)
    input_tokens: int = Field(0, ge=0)
    output_tokens: int = Field(0, ge=0)
    cost_cents: int = Field(0, ge=0)
    request_metadata: Optional[dict[str, Any]] = None


class AIUsageResponse(BaseSchema, IDMixin):
    """Recorded LLM call."""

    api_key_id: Optional[UUID] = None
    business_id: Optional[UUID] = None
    feature_name: str
    provider_name: str
    model_name: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    cost_cents: int
    created_at: datetime


class AIUsageSummary(BaseSchema):
    """Spend over a trailing window."""

    days: int
    total_spent_cents: int
    total_calls: int
    total_tokens: int
    by_provider: dict[str, int]
    by_feature: dict[str, int]


class FeatureMappingUpdate(BaseSchema):
    """Route a feature to a provider/model."""

    provider_name: str = Field(..., min_length=1, max_length=50)
    model_name: str = Field(..., min_length=1, max_length=100)
    api_key_id: Optional[UUID] = None
    is_active: bool = True


class FeatureMappingResponse(BaseSchema, IDMixin, TimestampMixin):
    """Feature to LLM mapping."""

    feature_name: str
    provider_name: str
    model_name: str
    api_key_id: Optional[UUID] = None
    is_active: bool
