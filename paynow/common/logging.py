"""Structured JSON logging with per-call context fields."""

import logging
import sys
from contextvars import ContextVar

from pythonjsonlogger.json import JsonFormatter


environment_ctx: ContextVar[str] = ContextVar("environment", default="")
payment_id_ctx: ContextVar[str] = ContextVar("payment_id", default="")
idempotency_key_ctx: ContextVar[str] = ContextVar("idempotency_key", default="")


class ContextFilter(logging.Filter):
    """Inject call correlation identifiers into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.environment = environment_ctx.get()
        record.payment_id = payment_id_ctx.get()
        record.idempotency_key = idempotency_key_ctx.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logger once per process (scripts, integrator apps)."""

    handler = logging.StreamHandler(sys.stdout)
    context_filter = ContextFilter()
    handler.addFilter(context_filter)
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(environment)s %(payment_id)s %(idempotency_key)s %(message)s"
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    root.addFilter(context_filter)


logger = logging.getLogger("paynow")
