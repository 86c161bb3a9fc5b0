"""Fetch and print the status of one Paynow payment."""

import argparse
import json

from paynow.client import PaynowClient
from paynow.common.config import PaynowSettings
from paynow.common.logging import configure_logging
from paynow.common.startup import log_startup_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the status of a Paynow payment.")
    parser.add_argument("--payment-id", required=True)
    args = parser.parse_args()

    settings = PaynowSettings()
    configure_logging(settings.log_level)
    log_startup_config("payment_status", settings)

    client = PaynowClient.from_settings(settings)
    status = client.get_payment_status(args.payment_id)
    print(json.dumps(status.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))


if __name__ == "__main__":
    main()
