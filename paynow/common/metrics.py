"""Prometheus collectors for outbound Paynow calls and webhook checks.

Registered on the default registry; integrators expose them through their own
scrape endpoint.
"""

from prometheus_client import Counter, Histogram


paynow_requests_total = Counter(
    "paynow_requests_total",
    "Total Paynow API calls",
    ["operation", "outcome"],
)
paynow_request_duration_seconds = Histogram(
    "paynow_request_duration_seconds",
    "Paynow API call duration seconds",
    ["operation"],
)
paynow_notification_verifications_total = Counter(
    "paynow_notification_verifications_total",
    "Webhook signature checks",
    ["result"],
)
