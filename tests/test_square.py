"""Square card charges against a mocked Payments API."""

import json
import uuid

import httpx
import pytest
from sqlalchemy import select

from app.core.errors import NotFoundError
from app.main import app as fastapi_app
from app.models.enums import PaymentMethod, PaymentStatus
from app.models.payment import RentPayment
from app.routers.payments import get_square_service
from app.services.property import PropertyService
from app.services.square_payment import (
    NOT_CONFIGURED,
    PROCESSING_FAILED,
    SANDBOX_URL,
    UNEXPECTED_RESPONSE,
    SquarePaymentService,
    build_payment_body,
)
from app.services.super_admin import SuperAdminService
from app.services.tenant import TenantService
from app.services.unit import UnitService


def _charge(**overrides) -> dict:
    request = {
        "amount_cents": 145000,
        "currency": "cad",
        "source_id": "cnon:card-nonce-ok",
        "idempotency_key": "rent-2026-11",
    }
    request.update(overrides)
    return request


def _transport(status_code: int, payload, seen: list = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


@pytest.fixture
async def square_settings(db):
    admin = SuperAdminService(db)
    await admin.upsert_setting("square_access_token", "EAAA-test-token")
    await admin.upsert_setting("square_location_id", "LOC123")
    await db.commit()


@pytest.fixture
async def tenant(db, business, property_payload):
    prop = await PropertyService(db).create_property(business.id, property_payload())
    unit = await UnitService(db).create_unit(business.id, prop.id, {"unit_number": "1"})
    tenant = await TenantService(db).create_tenant(
        business.id,
        {
            "unit_id": unit.id,
            "first_name": "Sam",
            "last_name": "Lee",
            "email": "sam@example.com",
        },
    )
    await db.commit()
    return tenant


def test_payment_body():
    body = build_payment_body(
        _charge(verification_token="verf-1", tenant_id="abc"), "LOC123"
    )
    assert body["amount_money"] == {"amount": 145000, "currency": "CAD"}
    assert body["location_id"] == "LOC123"
    assert body["note"] == "Rent Payment - rent"
    assert body["verification_token"] == "verf-1"
    assert body["reference_id"] == "abc"


async def test_not_configured(db, business):
    status_code, body = await SquarePaymentService(db).charge(business.id, _charge())
    assert status_code == 400
    assert body == {"success": False, "error": NOT_CONFIGURED}


async def test_completed_payment_is_recorded(db, business, tenant, square_settings):
    seen = []
    transport = _transport(
        200,
        {"payment": {"id": "sq-pay-1", "status": "COMPLETED", "receipt_url": "https://squareup.com/r/1"}},
        seen,
    )

    status_code, body = await SquarePaymentService(db, transport=transport).charge(
        business.id, _charge(tenant_id=tenant.id)
    )

    assert status_code == 200
    assert body == {"success": True, "payment_id": "sq-pay-1", "receipt_url": "https://squareup.com/r/1"}

    request = seen[0]
    assert str(request.url) == f"{SANDBOX_URL}/v2/payments"
    assert request.headers["Authorization"] == "Bearer EAAA-test-token"
    assert json.loads(request.content)["reference_id"] == str(tenant.id)

    result = await db.execute(select(RentPayment).where(RentPayment.tenant_id == tenant.id))
    payment = result.scalar_one()
    assert payment.amount_cents == 145000
    assert payment.status == PaymentStatus.PAID
    assert payment.payment_method == PaymentMethod.CREDIT_CARD
    assert payment.gateway_payment_id == "sq-pay-1"


async def test_declined_card(db, business, square_settings):
    transport = _transport(
        402,
        {"errors": [{"code": "CARD_DECLINED", "detail": "Card declined.", "category": "PAYMENT_METHOD_ERROR"}]},
    )
    status_code, body = await SquarePaymentService(db, transport=transport).charge(
        business.id, _charge()
    )
    assert status_code == 400
    assert body == {"success": False, "error": "Card declined.", "error_code": "CARD_DECLINED"}


async def test_unexpected_and_failed_responses(db, business, square_settings):
    pending = _transport(200, {"payment": {"id": "sq-pay-2", "status": "PENDING"}})
    status_code, body = await SquarePaymentService(db, transport=pending).charge(
        business.id, _charge()
    )
    assert (status_code, body) == (500, {"success": False, "error": UNEXPECTED_RESPONSE})

    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    status_code, body = await SquarePaymentService(
        db, transport=httpx.MockTransport(broken)
    ).charge(business.id, _charge())
    assert (status_code, body) == (500, {"success": False, "error": PROCESSING_FAILED})


@pytest.mark.parametrize(
    "payload, error",
    [
        (["bad gateway"], PROCESSING_FAILED),
        ("upstream down", PROCESSING_FAILED),
        ({"payment": "oops"}, UNEXPECTED_RESPONSE),
    ],
)
async def test_malformed_gateway_bodies(db, business, square_settings, payload, error):
    status_code, body = await SquarePaymentService(db, transport=_transport(502, payload)).charge(
        business.id, _charge()
    )
    assert (status_code, body) == (500, {"success": False, "error": error})


@pytest.mark.parametrize(
    "errors, error_code",
    [
        ([{"code": "GENERIC_DECLINE"}], "GENERIC_DECLINE"),
        ([], None),
        (["not-an-object"], None),
    ],
)
async def test_decline_without_detail_uses_default_message(
    db, business, square_settings, errors, error_code
):
    status_code, body = await SquarePaymentService(
        db, transport=_transport(400, {"errors": errors})
    ).charge(business.id, _charge())
    assert status_code == 400
    assert body == {"success": False, "error": "Payment failed", "error_code": error_code}


async def test_unknown_tenant_is_rejected_before_charging(db, business, square_settings):
    seen = []
    service = SquarePaymentService(db, transport=_transport(200, {}, seen))
    with pytest.raises(NotFoundError):
        await service.charge(
            business.id, _charge(tenant_id=uuid.uuid4())
        )
    assert seen == []


async def test_square_endpoint_passes_status_through(client, db, business, square_settings):
    transport = _transport(
        400, {"errors": [{"code": "INVALID_CARD_DATA", "detail": "Invalid card data."}]}
    )
    fastapi_app.dependency_overrides[get_square_service] = lambda: SquarePaymentService(
        db, transport=transport
    )

    response = await client.post("/v1/payments/square", json=_charge(currency="CAD"))

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_CARD_DATA"
