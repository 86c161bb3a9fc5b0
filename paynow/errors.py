"""Exceptions raised by the Paynow client.

Signature mismatches are not exceptions: verification returns a bool.
"""

from paynow.models import ProviderError


class PaynowError(Exception):
    """Base for every error this library raises."""


class GatewayError(PaynowError):
    """An outbound Paynow call failed. Never retried internally."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[ProviderError] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)


class GatewayValidationError(GatewayError):
    """Paynow rejected the request with a field-level error list."""


class GatewayHTTPError(GatewayError):
    """Non-2xx response without structured detail, or an unreadable body."""


class GatewayTimeoutError(GatewayError):
    pass


class GatewayNetworkError(GatewayError):
    pass


class MalformedNotificationError(PaynowError):
    """Webhook body is not JSON or does not match the notification shape."""
