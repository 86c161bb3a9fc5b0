"""Shared fixtures: credentials and a sample payment request."""

import pytest

from paynow.models import Buyer, Credentials, PaymentRequest
from tests.helpers import API_KEY, SIGNATURE_KEY


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key=API_KEY, signature_key=SIGNATURE_KEY)


@pytest.fixture
def payment_request() -> PaymentRequest:
    return PaymentRequest(
        amount=1000,
        external_id="order-123",
        description="Order #123",
        buyer=Buyer(email="jan.kowalski@example.com"),
    )
