"""Compute or check the Signature header of a webhook body.

Useful for replaying captured notifications against a local webhook handler.
Only `PAYNOW_SIGNATURE_KEY` is needed; it can also be passed with `--key`.
"""

import argparse
import os
from pathlib import Path

from paynow.signature import SignatureCalculator


def main() -> None:
    """Print the signature, or `valid`/`invalid` when `--verify` is given."""

    parser = argparse.ArgumentParser(description="Compute/verify a Paynow webhook signature.")
    parser.add_argument("--json", dest="json_inline", default=None, help="Inline raw body")
    parser.add_argument("--file", dest="json_file", default=None, help="Path to raw body file")
    parser.add_argument("--key", default=None, help="Signature key (defaults to PAYNOW_SIGNATURE_KEY)")
    parser.add_argument("--verify", default=None, metavar="SIGNATURE")
    args = parser.parse_args()

    if bool(args.json_inline) == bool(args.json_file):
        raise SystemExit("Provide exactly one of --json or --file")
    key = args.key or os.getenv("PAYNOW_SIGNATURE_KEY")
    if not key:
        raise SystemExit("Provide --key or set PAYNOW_SIGNATURE_KEY")

    # Signatures cover raw bytes, so read the file without decoding.
    body = args.json_inline.encode("utf-8") if args.json_inline else Path(args.json_file).read_bytes()
    calculator = SignatureCalculator(key)

    if args.verify is None:
        print(calculator.compute_webhook_signature(body))
        return
    if not calculator.verify_webhook_signature(args.verify, body):
        print("invalid")
        raise SystemExit(1)
    print("valid")


if __name__ == "__main__":
    main()
