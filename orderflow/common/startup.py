"""Startup-time helpers for safe config logging."""

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from orderflow.common.config import CommonSettings
from orderflow.common.logging import logger


SECRET_MARKERS = ("key", "secret", "password", "token")


def _safe_value(name: str, value: object) -> str:
    """Render a settings value, hiding secrets and DSN passwords."""

    if value is None or value == "":
        return "<unset>"
    if any(marker in name for marker in SECRET_MARKERS):
        return "<redacted>"
    if name.endswith("_dsn"):
        try:
            return make_url(str(value)).render_as_string(hide_password=True)
        except ArgumentError:
            return "<redacted>"
    return str(value)


def log_startup_config(config: CommonSettings, fields: list[str]) -> None:
    """Log the resolved values of selected settings for quick troubleshooting.

    Values come from the settings object, so `.env` files and defaults are
    reflected, not just the process environment.
    """

    snapshot = {"service": config.service_name}
    for field in fields:
        snapshot[field] = _safe_value(field, getattr(config, field, None))
    logger.info("startup_config=%s", snapshot)
