"""Tests for the blocking gateway client against a mocked Paynow API."""

import json

import httpx
import pytest

from paynow.client import PaynowClient
from paynow.common.logging import idempotency_key_ctx
from paynow.errors import (
    GatewayError,
    GatewayHTTPError,
    GatewayNetworkError,
    GatewayTimeoutError,
    GatewayValidationError,
)
from paynow.models import Buyer, Credentials, PaymentRequest, PaymentStatus
from paynow.signature import SignatureCalculator
from tests.helpers import API_KEY, SIGNATURE_KEY, RecordingHandler


CREATED = {"paymentId": "P1", "redirectUrl": "https://paywall.sandbox.paynow.pl/P1", "status": "NEW"}


def make_client(credentials: Credentials, handler: RecordingHandler) -> PaynowClient:
    return PaynowClient(credentials, transport=httpx.MockTransport(handler))


def test_create_payment_maps_created_response(credentials, payment_request):
    """201 body is mapped field for field into PaymentResponse."""

    handler = RecordingHandler(201, CREATED)

    payment = make_client(credentials, handler).create_payment(payment_request)

    assert payment.payment_id == "P1"
    assert payment.redirect_url == "https://paywall.sandbox.paynow.pl/P1"
    assert payment.status is PaymentStatus.NEW


def test_create_payment_sends_signed_request(credentials, payment_request):
    """The Signature header covers Api-Key, Idempotency-Key and the exact body sent."""

    handler = RecordingHandler(201, CREATED)
    make_client(credentials, handler).create_payment(payment_request)
    request = handler.last

    assert request.method == "POST"
    assert str(request.url) == "https://api.sandbox.paynow.pl/v3/payments"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Api-Key"] == API_KEY
    body = request.content.decode("utf-8")
    assert json.loads(body) == {
        "amount": 1000,
        "externalId": "order-123",
        "description": "Order #123",
        "buyer": {"email": "jan.kowalski@example.com"},
    }
    expected = SignatureCalculator(SIGNATURE_KEY).compute_api_signature(
        {"Api-Key": API_KEY, "Idempotency-Key": request.headers["Idempotency-Key"]},
        {},
        body,
    )
    assert request.headers["Signature"] == expected


def test_signature_key_never_leaves_the_client(credentials, payment_request):
    handler = RecordingHandler(201, CREATED)
    make_client(credentials, handler).create_payment(payment_request)
    request = handler.last

    assert SIGNATURE_KEY not in request.content.decode("utf-8")
    assert all(SIGNATURE_KEY not in value for value in request.headers.values())


def test_idempotency_key_is_fresh_per_call(credentials, payment_request):
    handler = RecordingHandler(201, CREATED)
    client = make_client(credentials, handler)

    client.create_payment(payment_request)
    client.create_payment(payment_request)

    first, second = (request.headers["Idempotency-Key"] for request in handler.requests)
    assert first and second and first != second
    assert idempotency_key_ctx.get() == ""


def test_non_ascii_buyer_is_sent_as_utf8(credentials):
    handler = RecordingHandler(201, CREATED)
    request = PaymentRequest(
        amount=4999,
        external_id=42,
        description="Zamówienie",
        buyer=Buyer(email="zofia@example.com", first_name="Żaneta", last_name="Wójcik"),
    )

    make_client(credentials, handler).create_payment(request)
    sent = handler.last

    assert "Żaneta".encode("utf-8") in sent.content
    expected = SignatureCalculator(SIGNATURE_KEY).compute_api_signature(
        {"Api-Key": API_KEY, "Idempotency-Key": sent.headers["Idempotency-Key"]},
        {},
        sent.content.decode("utf-8"),
    )
    assert sent.headers["Signature"] == expected


def test_field_errors_become_validation_error(credentials, payment_request):
    """Provider's structured error list is rendered as `field: message`."""

    handler = RecordingHandler(400, {"errors": [{"field": "amount", "message": "must be positive"}]})

    with pytest.raises(GatewayValidationError) as exc_info:
        make_client(credentials, handler).create_payment(payment_request)

    assert isinstance(exc_info.value, GatewayError)
    assert "amount: must be positive" in str(exc_info.value)
    assert exc_info.value.status_code == 400
    assert exc_info.value.errors[0].field == "amount"


def test_multiple_errors_are_joined_and_field_is_optional(credentials, payment_request):
    handler = RecordingHandler(
        400,
        {
            "errors": [
                {"field": "buyer.email", "message": "invalid email", "code": "VALIDATION_ERROR"},
                {"message": "currency not supported"},
            ]
        },
    )

    with pytest.raises(GatewayValidationError) as exc_info:
        make_client(credentials, handler).create_payment(payment_request)

    assert exc_info.value.message == "Paynow API Error: buyer.email: invalid email, currency not supported"


def test_status_without_detail_becomes_http_error(credentials, payment_request):
    handler = RecordingHandler(503, content=b"Service Unavailable")

    with pytest.raises(GatewayHTTPError) as exc_info:
        make_client(credentials, handler).create_payment(payment_request)

    assert exc_info.value.message == "Paynow API Error: HTTP 503"
    assert exc_info.value.status_code == 503


def test_timeout_is_reported_not_retried(credentials, payment_request):
    handler = RecordingHandler(exc=httpx.ReadTimeout)

    with pytest.raises(GatewayTimeoutError) as exc_info:
        make_client(credentials, handler).create_payment(payment_request)

    assert exc_info.value.message == "Paynow API Error: Request timeout"
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)
    assert len(handler.requests) == 1


def test_network_failure_is_gateway_error(credentials):
    handler = RecordingHandler(exc=httpx.ConnectError)

    with pytest.raises(GatewayNetworkError) as exc_info:
        make_client(credentials, handler).get_payment_status("P1")

    assert exc_info.value.message.startswith("Paynow API Error: ")
    assert "ConnectError" in exc_info.value.message


def test_unreadable_success_body_is_http_error(credentials, payment_request):
    handler = RecordingHandler(201, content=b"<html>ok</html>")

    with pytest.raises(GatewayHTTPError) as exc_info:
        make_client(credentials, handler).create_payment(payment_request)

    assert "invalid response body" in exc_info.value.message


def test_requests_use_thirty_second_timeout(credentials, payment_request):
    handler = RecordingHandler(201, CREATED)
    make_client(credentials, handler).create_payment(payment_request)

    assert handler.last.extensions["timeout"] == {"connect": 30.0, "read": 30.0, "write": 30.0, "pool": 30.0}


def test_get_payment_status(credentials):
    handler = RecordingHandler(
        200,
        {
            "paymentId": "P1",
            "externalId": "order-123",
            "status": "CONFIRMED",
            "amount": 1000,
            "currency": "PLN",
            "modifiedAt": "2024-05-01T12:00:00Z",
        },
    )

    status = make_client(credentials, handler).get_payment_status("P1")
    request = handler.last

    assert request.method == "GET"
    assert str(request.url) == "https://api.sandbox.paynow.pl/v3/payments/P1"
    assert request.headers["Api-Key"] == API_KEY
    assert "Signature" not in request.headers
    assert "Idempotency-Key" not in request.headers
    assert "Content-Type" not in request.headers
    assert request.content == b""
    assert status.status is PaymentStatus.CONFIRMED
    assert status.amount == 1000
    assert status.modified_at == "2024-05-01T12:00:00Z"


def test_get_payment_status_not_found(credentials):
    handler = RecordingHandler(404, {"errors": [{"message": "Payment not found", "code": "NOT_FOUND"}]})

    with pytest.raises(GatewayValidationError) as exc_info:
        make_client(credentials, handler).get_payment_status("missing")

    assert exc_info.value.message == "Paynow API Error: Payment not found"
    assert exc_info.value.status_code == 404


def test_get_payment_status_rejects_empty_id(credentials):
    with pytest.raises(ValueError):
        make_client(credentials, RecordingHandler()).get_payment_status("")


def test_production_environment_uses_production_base_url(payment_request):
    handler = RecordingHandler(201, CREATED)
    credentials = Credentials(api_key=API_KEY, signature_key=SIGNATURE_KEY, environment="production")

    make_client(credentials, handler).create_payment(payment_request)

    assert str(handler.last.url) == "https://api.paynow.pl/v3/payments"
