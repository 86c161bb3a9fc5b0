"""HMAC-SHA256 signatures for Paynow API requests and webhook notifications.

Outbound requests are signed over a canonical JSON document:

    {"headers":{...sorted...},"parameters":{...sorted...},"body":"<raw body>"}

Paynow recomputes the same document server-side, so key names, key order and
separators must match byte for byte. Webhooks are signed over the raw body.
Both digests are Base64 encoded.
"""

import base64
import hashlib
import hmac
import json

from pydantic import SecretStr


def _to_bytes(data: str | bytes) -> bytes:
    if isinstance(data, bytes):
        return data
    return data.encode("utf-8")


def canonical_api_payload(headers: dict[str, str], parameters: dict[str, str], body: str) -> str:
    """Build the exact string Paynow signs for an API request."""

    document = {
        "headers": {key: headers[key] for key in sorted(headers)},
        "parameters": {key: parameters[key] for key in sorted(parameters)},
        "body": body,
    }
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


class SignatureCalculator:
    """Computes and verifies signatures with one merchant signature key."""

    def __init__(self, signature_key: str | SecretStr) -> None:
        if isinstance(signature_key, SecretStr):
            signature_key = signature_key.get_secret_value()
        self._key = signature_key.encode("utf-8")

    def __repr__(self) -> str:
        return "SignatureCalculator(signature_key='**********')"

    def _digest(self, message: bytes) -> str:
        mac = hmac.new(self._key, message, hashlib.sha256).digest()
        return base64.b64encode(mac).decode("ascii")

    def compute_api_signature(
        self,
        headers: dict[str, str],
        parameters: dict[str, str],
        body: str,
    ) -> str:
        """Signature for the `Signature` header of an outbound request."""

        return self._digest(_to_bytes(canonical_api_payload(headers, parameters, body)))

    def verify_api_signature(
        self,
        received_signature: str,
        headers: dict[str, str],
        parameters: dict[str, str],
        body: str,
    ) -> bool:
        return self._matches(received_signature, self.compute_api_signature(headers, parameters, body))

    def compute_webhook_signature(self, raw_body: str | bytes) -> str:
        """Signature Paynow attaches to a notification with this raw body."""

        return self._digest(_to_bytes(raw_body))

    def verify_webhook_signature(self, received_signature: str, raw_body: str | bytes) -> bool:
        """True only when `received_signature` is exactly the expected digest."""

        return self._matches(received_signature, self.compute_webhook_signature(raw_body))

    @staticmethod
    def _matches(received: str, expected: str) -> bool:
        if not isinstance(received, str) or not received:
            return False
        # compare_digest on str rejects non-ASCII input, so compare bytes.
        return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))
