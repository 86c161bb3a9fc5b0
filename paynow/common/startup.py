"""Startup-time helpers for safe config logging."""

from paynow.common.config import PaynowSettings
from paynow.common.logging import logger


SECRET_MARKERS = ("KEY", "SECRET", "PASSWORD", "TOKEN")


def _safe_value(name: str, value) -> str:
    """Return a printable value with simple redaction for secret-like names."""

    if value is None:
        return "<unset>"
    if any(marker in name.upper() for marker in SECRET_MARKERS):
        return "<redacted>"
    return str(getattr(value, "value", value))


def redacted_config(settings: PaynowSettings) -> dict[str, str]:
    return {name: _safe_value(name, value) for name, value in settings.model_dump().items()}


def log_startup_config(tool_name: str, settings: PaynowSettings) -> None:
    """Log effective settings for quick troubleshooting."""

    config = {"tool": tool_name, **redacted_config(settings)}
    logger.info("startup_config=%s", config)
