"""Paynow v3 gateway client.

Every call is a single round trip over a short-lived httpx client: build the
request, sign it, send it, then map the response or failure. Nothing is
retried and no session outlives a call.

Webhooks: always call `verify_notification` before `parse_notification`.
"""

from contextlib import contextmanager
from time import perf_counter
from typing import TypeVar
from urllib.parse import quote
from uuid import uuid4

import httpx
from pydantic import ValidationError

from paynow.common.config import DEFAULT_TIMEOUT_SECONDS, PaynowSettings
from paynow.common.logging import environment_ctx, idempotency_key_ctx, logger, payment_id_ctx
from paynow.common.metrics import (
    paynow_notification_verifications_total,
    paynow_request_duration_seconds,
    paynow_requests_total,
)
from paynow.errors import (
    GatewayError,
    GatewayHTTPError,
    GatewayNetworkError,
    GatewayTimeoutError,
    GatewayValidationError,
    MalformedNotificationError,
)
from paynow.models import (
    Credentials,
    PaymentNotification,
    PaymentRequest,
    PaymentResponse,
    PaymentStatusResponse,
    ProviderError,
    ProviderErrorEnvelope,
    WireModel,
)
from paynow.signature import SignatureCalculator


ERROR_PREFIX = "Paynow API Error"

ModelT = TypeVar("ModelT", bound=WireModel)
ClientT = TypeVar("ClientT", bound="BasePaynowClient")

_OUTCOMES = {
    GatewayValidationError: "validation_error",
    GatewayHTTPError: "http_error",
    GatewayTimeoutError: "timeout",
    GatewayNetworkError: "network_error",
}


def _provider_errors(response: httpx.Response) -> list[ProviderError]:
    try:
        return ProviderErrorEnvelope.model_validate_json(response.content).errors
    except ValidationError:
        return []


def _format_provider_error(error: ProviderError) -> str:
    if error.field:
        return f"{error.field}: {error.message}"
    return error.message


def error_from_response(response: httpx.Response) -> GatewayError:
    """Map a non-2xx response, preferring the provider's field-level errors."""

    errors = _provider_errors(response)
    if errors:
        details = ", ".join(_format_provider_error(error) for error in errors)
        return GatewayValidationError(
            f"{ERROR_PREFIX}: {details}",
            status_code=response.status_code,
            errors=errors,
        )
    return GatewayHTTPError(f"{ERROR_PREFIX}: HTTP {response.status_code}", status_code=response.status_code)


def error_from_transport(exc: httpx.RequestError) -> GatewayError:
    if isinstance(exc, httpx.TimeoutException):
        return GatewayTimeoutError(f"{ERROR_PREFIX}: Request timeout")
    return GatewayNetworkError(f"{ERROR_PREFIX}: {str(exc) or type(exc).__name__}")


def parse_response(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Return the typed 2xx body or raise the mapped `GatewayError`."""

    if not response.is_success:
        raise error_from_response(response)
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise GatewayHTTPError(
            f"{ERROR_PREFIX}: invalid response body (HTTP {response.status_code})",
            status_code=response.status_code,
        ) from exc


class BasePaynowClient:
    """Transport-independent half of the client: signing, URLs, webhooks."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self.base_url = credentials.environment.base_url
        self.timeout = timeout
        self.signature_calculator = SignatureCalculator(credentials.signature_key)
        self._transport = transport

    @classmethod
    def from_settings(cls: type[ClientT], settings: PaynowSettings, **kwargs) -> ClientT:
        kwargs.setdefault("timeout", settings.timeout_seconds)
        return cls(settings.to_credentials(), **kwargs)

    def _prepare_create_payment(self, request: PaymentRequest) -> tuple[str, dict[str, str], str]:
        """Return (idempotency key, HTTP headers, body) for `POST /payments`.

        The body string sent on the wire is exactly the one that was signed.
        """

        idempotency_key = str(uuid4())
        body = request.to_json()
        signed_headers = {
            "Api-Key": self.credentials.api_key,
            "Idempotency-Key": idempotency_key,
        }
        signature = self.signature_calculator.compute_api_signature(signed_headers, {}, body)
        headers = {
            "Content-Type": "application/json",
            "Api-Key": self.credentials.api_key,
            "Signature": signature,
            "Idempotency-Key": idempotency_key,
        }
        return idempotency_key, headers, body

    def _status_url(self, payment_id: str) -> str:
        if not isinstance(payment_id, str) or not payment_id:
            raise ValueError("payment_id must be a non-empty string")
        return f"{self.base_url}/payments/{quote(payment_id, safe='')}"

    @contextmanager
    def _call_context(self, operation: str, payment_id: str = "", idempotency_key: str = ""):
        """Bind log context, time the call and count its outcome."""

        tokens = [
            (environment_ctx, environment_ctx.set(self.credentials.environment.value)),
            (payment_id_ctx, payment_id_ctx.set(payment_id)),
            (idempotency_key_ctx, idempotency_key_ctx.set(idempotency_key)),
        ]
        start = perf_counter()
        try:
            yield
        except GatewayError as exc:
            paynow_requests_total.labels(operation=operation, outcome=_OUTCOMES.get(type(exc), "error")).inc()
            logger.warning("paynow call failed operation=%s error=%s", operation, exc.message)
            raise
        else:
            paynow_requests_total.labels(operation=operation, outcome="success").inc()
        finally:
            paynow_request_duration_seconds.labels(operation=operation).observe(max(0.0, perf_counter() - start))
            for var, token in reversed(tokens):
                var.reset(token)

    def verify_notification(self, signature: str, raw_body: str | bytes) -> bool:
        """Check the webhook `Signature` header against the raw body."""

        valid = self.signature_calculator.verify_webhook_signature(signature, raw_body)
        paynow_notification_verifications_total.labels(result="valid" if valid else "invalid").inc()
        if not valid:
            logger.warning("notification signature mismatch")
        return valid

    def parse_notification(self, raw_body: str | bytes) -> PaymentNotification:
        """Parse a webhook body. Does not check the signature."""

        try:
            notification = PaymentNotification.model_validate_json(raw_body)
        except ValidationError as exc:
            raise MalformedNotificationError(
                f"Invalid notification data format: {exc.error_count()} error(s)"
            ) from exc
        logger.info(
            "notification parsed payment_id=%s status=%s",
            notification.payment_id,
            notification.status.value,
        )
        return notification


class PaynowClient(BasePaynowClient):
    """Blocking client over `httpx.Client`."""

    def _send(self, method: str, url: str, headers: dict[str, str], content: str | None = None) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                return client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as exc:
            raise error_from_transport(exc) from exc

    def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Create a payment; a fresh idempotency key is used for every call."""

        idempotency_key, headers, body = self._prepare_create_payment(request)
        with self._call_context("create_payment", idempotency_key=idempotency_key):
            response = self._send("POST", f"{self.base_url}/payments", headers, body)
            payment = parse_response(response, PaymentResponse)
            logger.info("payment created payment_id=%s status=%s", payment.payment_id, payment.status.value)
            return payment

    def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        url = self._status_url(payment_id)
        with self._call_context("get_payment_status", payment_id=payment_id):
            response = self._send("GET", url, {"Api-Key": self.credentials.api_key})
            return parse_response(response, PaymentStatusResponse)


class AsyncPaynowClient(BasePaynowClient):
    """Same operations as `PaynowClient`, as coroutines over `httpx.AsyncClient`."""

    async def _send(
        self, method: str, url: str, headers: dict[str, str], content: str | None = None
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as exc:
            raise error_from_transport(exc) from exc

    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        idempotency_key, headers, body = self._prepare_create_payment(request)
        with self._call_context("create_payment", idempotency_key=idempotency_key):
            response = await self._send("POST", f"{self.base_url}/payments", headers, body)
            payment = parse_response(response, PaymentResponse)
            logger.info("payment created payment_id=%s status=%s", payment.payment_id, payment.status.value)
            return payment

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponse:
        url = self._status_url(payment_id)
        with self._call_context("get_payment_status", payment_id=payment_id):
            response = await self._send("GET", url, {"Api-Key": self.credentials.api_key})
            return parse_response(response, PaymentStatusResponse)
