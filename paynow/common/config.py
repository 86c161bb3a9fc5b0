"""Environment-driven settings for scripts and integrators.

The client itself only needs an explicit `Credentials` object; this loader is
an optional convenience (see `.env.example`). Nothing is read at import time.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from paynow.models import Credentials, Environment


DEFAULT_TIMEOUT_SECONDS = 30.0


class PaynowSettings(BaseSettings):
    """Typed view of `PAYNOW_*` environment variables."""

    api_key: str
    signature_key: SecretStr
    environment: Environment = Environment.SANDBOX
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    model_config = SettingsConfigDict(env_prefix="PAYNOW_", env_file=".env", extra="ignore")

    def to_credentials(self) -> Credentials:
        return Credentials(
            api_key=self.api_key,
            signature_key=self.signature_key,
            environment=self.environment,
        )
