"""Startup-time helpers for safe config logging."""

from pydantic import SecretStr
from sqlalchemy.engine import make_url

from cardpay.common.config import CommonSettings
from cardpay.common.logging import logger


def _safe_value(name: str, value) -> str:
    """Return a printable value with secrets redacted and DSN passwords hidden."""

    if value is None:
        return "<unset>"
    if isinstance(value, SecretStr):
        return "<redacted>"
    if any(secret in name.upper() for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN"]):
        return "<redacted>"
    if name.endswith("_dsn"):
        return make_url(value).render_as_string(hide_password=True)
    return str(value)


def log_startup_config(config: CommonSettings, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    snapshot = {"service": config.service_name}
    for key in keys:
        snapshot[key] = _safe_value(key, getattr(config, key, None))
    logger.info("startup_config=%s", snapshot)
