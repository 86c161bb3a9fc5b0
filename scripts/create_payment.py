"""Create one Paynow payment from the command line.

Credentials come from `PAYNOW_*` environment variables (or `.env`).
"""

import argparse
import json

from paynow.client import PaynowClient
from paynow.common.config import PaynowSettings
from paynow.common.logging import configure_logging
from paynow.common.startup import log_startup_config
from paynow.models import Buyer, PaymentRequest


def build_request(args: argparse.Namespace) -> PaymentRequest:
    """Translate CLI args into a payment request (amount in minor units)."""

    return PaymentRequest(
        amount=args.amount,
        external_id=args.external_id,
        description=args.description,
        buyer=Buyer(email=args.email),
        continue_url=args.continue_url,
        currency=args.currency,
    )


def main() -> None:
    """Parse CLI args, create the payment and print the response."""

    parser = argparse.ArgumentParser(description="Create a Paynow payment.")
    parser.add_argument("--amount", type=int, required=True, help="Amount in minor units, e.g. 1000 = 10.00 PLN")
    parser.add_argument("--external-id", required=True)
    parser.add_argument("--description", required=True)
    parser.add_argument("--email", required=True, help="Buyer email")
    parser.add_argument("--currency", default=None, choices=["PLN", "EUR", "USD", "GBP"])
    parser.add_argument("--continue-url", default=None)
    args = parser.parse_args()

    settings = PaynowSettings()
    configure_logging(settings.log_level)
    log_startup_config("create_payment", settings)

    client = PaynowClient.from_settings(settings)
    payment = client.create_payment(build_request(args))
    print(json.dumps(payment.model_dump(mode="json", by_alias=True), indent=2))


if __name__ == "__main__":
    main()
