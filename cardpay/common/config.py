"""Central environment-driven settings for the payment intake service.

The process loads this once at startup (see `.env.example`).
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "cardpay"
    log_level: str = "INFO"
    postgres_dsn: str
    # Checked by the tokenizer at startup, not here, so the failure carries a
    # domain error instead of a settings validation dump.
    secret_key: SecretStr | None = None
    db_connect_retries: int = 20
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
