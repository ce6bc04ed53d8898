"""Card payments through Square's Payments API."""

import logging
from datetime import date
from typing import Any, Optional
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.enums import AuditAction, PaymentMethod, PaymentStatus, PaymentType
from app.models.payment import RentPayment
from app.services.audit import AuditService
from app.services.super_admin import SuperAdminService
from app.services.tenant import TenantService

logger = logging.getLogger(__name__)

PRODUCTION_URL = "https://connect.squareup.com"
SANDBOX_URL = "https://connect.squareupsandbox.com"

NOT_CONFIGURED = "Square credentials not configured"
UNEXPECTED_RESPONSE = "Unexpected response from Square"
PROCESSING_FAILED = "Payment processing failed. Please try again or contact support."


def square_base_url(environment: Optional[str]) -> str:
    return PRODUCTION_URL if environment == "production" else SANDBOX_URL


def build_payment_body(request: dict[str, Any], location_id: str) -> dict[str, Any]:
    """JSON body for ``POST /v2/payments``."""
    payment_type = request.get("payment_type") or PaymentType.RENT
    if isinstance(payment_type, PaymentType):
        payment_type = payment_type.value

    body: dict[str, Any] = {
        "source_id": request["source_id"],
        "idempotency_key": request["idempotency_key"],
        "amount_money": {
            "amount": request["amount_cents"],
            "currency": (request.get("currency") or "CAD").upper(),
        },
        "location_id": location_id,
        "note": request.get("description") or f"Rent Payment - {payment_type}",
    }
    if request.get("verification_token"):
        body["verification_token"] = request["verification_token"]
    if request.get("tenant_id"):
        body["reference_id"] = str(request["tenant_id"])
    return body


class SquarePaymentService:
    """Charges a card nonce and records the resulting rent payment.

    ``charge`` returns ``(status_code, body)`` so the route can pass the
    gateway outcome straight through.
    """

    def __init__(
        self,
        db: AsyncSession,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.db = db
        self.transport = transport

    async def _credentials(self) -> tuple[Optional[str], Optional[str], str]:
        admin = SuperAdminService(self.db)
        access_token = await admin.get_setting_value("square_access_token")
        location_id = await admin.get_setting_value("square_location_id")
        environment = await admin.get_setting_value("square_environment", "sandbox")
        return access_token, location_id, environment

    async def charge(
        self,
        business_id: UUID,
        request: dict[str, Any],
        actor_id: Optional[UUID] = None,
    ) -> tuple[int, dict[str, Any]]:
        access_token, location_id, environment = await self._credentials()
        if not access_token or not location_id:
            logger.warning("[SQUARE] Charge attempted without configured credentials")
            return 400, {"success": False, "error": NOT_CONFIGURED}

        tenant = None
        if request.get("tenant_id"):
            tenant = await TenantService(self.db).get_tenant(business_id, request["tenant_id"])

        settings = get_settings()
        try:
            async with httpx.AsyncClient(
                base_url=square_base_url(environment),
                transport=self.transport,
                timeout=settings.square_timeout_seconds,
            ) as client:
                response = await client.post(
                    "/v2/payments",
                    json=build_payment_body(request, location_id),
                    headers={
                        "Square-Version": settings.square_api_version,
                        "Authorization": f"Bearer {access_token}",
                        "Content-Type": "application/json",
                    },
                )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[SQUARE] Payment request error: {e}")
            return 500, {"success": False, "error": PROCESSING_FAILED}

        if not isinstance(data, dict):
            logger.error(f"[SQUARE] Malformed gateway response: {response.status_code}")
            return 500, {"success": False, "error": PROCESSING_FAILED}

        payment = data.get("payment")
        if not isinstance(payment, dict):
            payment = {}
        if payment.get("status") == "COMPLETED":
            if tenant is not None:
                await self._record_payment(business_id, tenant.id, request, payment, actor_id)
            logger.info(f"[SQUARE] Payment captured: {payment.get('id')}")
            return 200, {
                "success": True,
                "payment_id": payment.get("id"),
                "receipt_url": payment.get("receipt_url"),
            }

        errors = data.get("errors")
        if errors is not None:
            first = errors[0] if isinstance(errors, list) and errors else {}
            if not isinstance(first, dict):
                first = {}
            logger.warning(f"[SQUARE] Payment declined: {first.get('code')} {first.get('detail')}")
            return 400, {
                "success": False,
                "error": first.get("detail") or "Payment failed",
                "error_code": first.get("code"),
            }

        logger.error(f"[SQUARE] Unexpected response: {response.status_code}")
        return 500, {"success": False, "error": UNEXPECTED_RESPONSE}

    async def _record_payment(
        self,
        business_id: UUID,
        tenant_id: UUID,
        request: dict[str, Any],
        payment: dict[str, Any],
        actor_id: Optional[UUID],
    ) -> RentPayment:
        record = RentPayment(
            tenant_id=tenant_id,
            amount_cents=request["amount_cents"],
            currency_code=(request.get("currency") or "CAD").upper(),
            payment_type=request.get("payment_type") or PaymentType.RENT,
            payment_method=PaymentMethod.CREDIT_CARD,
            status=PaymentStatus.PAID,
            paid_date=date.today(),
            gateway_payment_id=payment.get("id"),
            receipt_url=payment.get("receipt_url"),
            notes=request.get("description"),
        )
        self.db.add(record)
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.PAYMENT_CAPTURED,
            resource_type="rent_payment",
            resource_id=record.id,
            business_id=business_id,
            user_id=actor_id,
            details={"gateway_payment_id": payment.get("id"), "amount_cents": record.amount_cents},
        )
        return record
