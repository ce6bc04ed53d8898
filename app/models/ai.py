"""AI provider key, model catalog and usage models."""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    String, DateTime, ForeignKey, Text, Integer, BigInteger, Boolean, Uuid,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONType, enum_column
from app.models.enums import KeyVerificationStatus

PROVIDER_DISPLAY_NAMES = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "google": "Google AI",
}


class AIApiKey(Base):
    """Platform-level API key for an LLM provider."""

    __tablename__ = "ai_api_keys"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    key_name: Mapped[str] = mapped_column(String(255), nullable=False)
    provider_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    # Never serialized in API responses
    api_key: Mapped[str] = mapped_column(Text, nullable=False)
    supported_models: Mapped[list[str]] = mapped_column(JSONType, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    verification_status: Mapped[KeyVerificationStatus] = mapped_column(
        enum_column(KeyVerificationStatus),
        default=KeyVerificationStatus.PENDING,
        nullable=False,
    )
    last_verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    total_spent_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    monthly_limit_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def key_preview(self) -> str:
        """Masked key, e.g. ``sk-a…WXYZ``."""
        key = self.api_key or ""
        if len(key) <= 8:
            return "…"
        return f"{key[:4]}…{key[-4:]}"

    @property
    def provider_display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES.get(self.provider_name, self.provider_name)


class AILLMProvider(Base):
    """Catalog of provider models and their token pricing."""

    __tablename__ = "ai_llm_providers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    provider_name: Mapped[str] = mapped_column(String(50), nullable=False)
    model_name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Cents per million tokens
    input_cost_per_mtok_cents: Mapped[int] = mapped_column(Integer, default=0)
    output_cost_per_mtok_cents: Mapped[int] = mapped_column(Integer, default=0)
    context_window: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("provider_name", "model_name", name="uq_ai_provider_model"),
    )


class AIUsageLog(Base):
    """One billable LLM call."""

    __tablename__ = "ai_usage_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    api_key_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("ai_api_keys.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    business_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    feature_name: Mapped[str] = mapped_column(String(100), nullable=False)
    provider_name: Mapped[str] = mapped_column(String(50), nullable=False)
    model_name: Mapped[str] = mapped_column(String(100), nullable=False)
    input_tokens: Mapped[int] = mapped_column(Integer, default=0)
    output_tokens: Mapped[int] = mapped_column(Integer, default=0)
    total_tokens: Mapped[int] = mapped_column(Integer, default=0)
    cost_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    request_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)


class AIFeatureLLMMapping(Base):
    """Which provider/model serves a product feature."""

    __tablename__ = "ai_feature_llm_mappings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    feature_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    provider_name: Mapped[str] = mapped_column(String(50), nullable=False)
    model_name: Mapped[str] = mapped_column(String(100), nullable=False)
    api_key_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("ai_api_keys.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
