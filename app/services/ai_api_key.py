"""LLM provider keys, model catalog, usage accounting and feature routing."""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import NotFoundError
from app.models.ai import (
    PROVIDER_DISPLAY_NAMES,
    AIApiKey,
    AIFeatureLLMMapping,
    AILLMProvider,
    AIUsageLog,
)
from app.models.enums import KeyVerificationStatus

logger = logging.getLogger(__name__)

UNKNOWN_PROVIDER = "unknown"
ANTHROPIC_VERSION = "2023-06-01"


def detect_provider_from_key(api_key: str) -> str:
    """Guess the provider from the key prefix."""
    # Anthropic keys also start with "sk-"
    if api_key.startswith("sk-ant-"):
        return "anthropic"
    if api_key.startswith("sk-"):
        return "openai"
    if api_key.startswith("AIza"):
        return "google"
    return UNKNOWN_PROVIDER


def provider_display_name(provider_name: str) -> str:
    return PROVIDER_DISPLAY_NAMES.get(provider_name, provider_name)


def build_verification_request(provider_name: str, api_key: str) -> Optional[httpx.Request]:
    """Model-listing request used to prove a key works."""
    if provider_name == "openai":
        return httpx.Request(
            "GET",
            "https://api.openai.com/v1/models",
            headers={"Authorization": f"Bearer {api_key}"},
        )
    if provider_name == "anthropic":
        return httpx.Request(
            "GET",
            "https://api.anthropic.com/v1/models",
            headers={"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
        )
    if provider_name == "google":
        return httpx.Request(
            "GET",
            "https://generativelanguage.googleapis.com/v1beta/models",
            params={"key": api_key},
        )
    return None


class AIApiKeyService:
    """Super-admin management of platform LLM keys."""

    def __init__(
        self,
        db: AsyncSession,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.db = db
        self.transport = transport

    # === Keys ===

    async def list_keys(self) -> list[AIApiKey]:
        result = await self.db.execute(
            select(AIApiKey).order_by(AIApiKey.provider_name, AIApiKey.key_name)
        )
        return list(result.scalars().all())

    async def get_key(self, key_id: UUID) -> AIApiKey:
        result = await self.db.execute(select(AIApiKey).where(AIApiKey.id == key_id))
        key = result.scalar_one_or_none()
        if not key:
            raise NotFoundError("API key")
        return key

    async def create_key(
        self, data: dict[str, Any], created_by_id: Optional[UUID] = None
    ) -> AIApiKey:
        if not data.get("provider_name"):
            data["provider_name"] = detect_provider_from_key(data["api_key"])
        key = AIApiKey(
            verification_status=KeyVerificationStatus.PENDING,
            created_by_id=created_by_id,
            **data,
        )
        self.db.add(key)
        await self.db.flush()
        return key

    async def update_key(self, key_id: UUID, data: dict[str, Any]) -> AIApiKey:
        key = await self.get_key(key_id)
        new_secret = data.get("api_key")
        if new_secret and new_secret != key.api_key:
            key.verification_status = KeyVerificationStatus.PENDING
            key.last_verified_at = None
        for field, value in data.items():
            setattr(key, field, value)
        await self.db.flush()
        return key

    async def delete_key(self, key_id: UUID) -> None:
        key = await self.get_key(key_id)
        await self.db.delete(key)
        await self.db.flush()

    async def verify_api_key(self, key_id: UUID) -> AIApiKey:
        """Call the provider and record whether the key was accepted."""
        key = await self.get_key(key_id)
        request = build_verification_request(key.provider_name, key.api_key)

        verified = False
        if request is None:
            logger.warning(f"[AI] Cannot verify key {key.id}: unknown provider {key.provider_name}")
        else:
            try:
                async with httpx.AsyncClient(
                    transport=self.transport,
                    timeout=get_settings().ai_key_verify_timeout_seconds,
                ) as client:
                    response = await client.send(request)
                verified = response.is_success
                if not verified:
                    logger.warning(
                        f"[AI] Key {key.id} rejected by {key.provider_name}: {response.status_code}"
                    )
            except httpx.HTTPError as e:
                logger.error(f"[AI] Key verification error for {key.id}: {e}")

        key.verification_status = (
            KeyVerificationStatus.VERIFIED if verified else KeyVerificationStatus.FAILED
        )
        key.last_verified_at = datetime.utcnow()
        await self.db.flush()
        return key

    # === Catalog ===

    async def list_providers(self) -> list[AILLMProvider]:
        result = await self.db.execute(
            select(AILLMProvider)
            .where(AILLMProvider.is_active == True)  # noqa: E712
            .order_by(AILLMProvider.provider_name, AILLMProvider.model_name)
        )
        return list(result.scalars().all())

    # === Usage ===

    async def log_usage(self, data: dict[str, Any]) -> AIUsageLog:
        """Record one call and add its cost to the key's running total."""
        entry = AIUsageLog(
            total_tokens=data.get("input_tokens", 0) + data.get("output_tokens", 0),
            **data,
        )
        self.db.add(entry)

        if entry.api_key_id:
            key = await self.get_key(entry.api_key_id)
            key.total_spent_cents = (key.total_spent_cents or 0) + (entry.cost_cents or 0)

        await self.db.flush()
        return entry

    async def get_usage_summary(self, days: int = 30) -> dict[str, Any]:
        since = datetime.utcnow() - timedelta(days=days)
        result = await self.db.execute(
            select(AIUsageLog).where(AIUsageLog.created_at >= since)
        )
        logs = result.scalars().all()

        by_provider: dict[str, int] = defaultdict(int)
        by_feature: dict[str, int] = defaultdict(int)
        total_spent = 0
        total_tokens = 0
        for log in logs:
            cost = log.cost_cents or 0
            total_spent += cost
            total_tokens += log.total_tokens or 0
            by_provider[log.provider_name] += cost
            by_feature[log.feature_name] += cost

        return {
            "days": days,
            "total_spent_cents": total_spent,
            "total_calls": len(logs),
            "total_tokens": total_tokens,
            "by_provider": dict(by_provider),
            "by_feature": dict(by_feature),
        }

    # === Feature routing ===

    async def list_feature_mappings(self) -> list[AIFeatureLLMMapping]:
        result = await self.db.execute(
            select(AIFeatureLLMMapping).order_by(AIFeatureLLMMapping.feature_name)
        )
        return list(result.scalars().all())

    async def update_feature_mapping(
        self, feature_name: str, data: dict[str, Any]
    ) -> AIFeatureLLMMapping:
        """Create or replace the provider/model a feature is routed to."""
        result = await self.db.execute(
            select(AIFeatureLLMMapping).where(AIFeatureLLMMapping.feature_name == feature_name)
        )
        mapping = result.scalar_one_or_none()
        if mapping is None:
            mapping = AIFeatureLLMMapping(feature_name=feature_name)
            self.db.add(mapping)
        for field, value in data.items():
            setattr(mapping, field, value)
        await self.db.flush()
        return mapping
