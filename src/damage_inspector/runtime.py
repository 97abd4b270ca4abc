"""Process-wide application handle reused across warm invocations."""

import logging

from fastapi import FastAPI
from pydantic import ValidationError as PydanticValidationError

from damage_inspector.api.app import create_app, create_configuration_error_app
from damage_inspector.app_logging import configure_logging
from damage_inspector.config import Settings, blank_required_fields
from damage_inspector.containers import build_container
from damage_inspector.errors import ConfigurationError

logger = logging.getLogger(__name__)

_app: FastAPI | None = None


def load_settings() -> Settings:
    """Load settings, reporting every missing required variable at once."""
    try:
        settings = Settings()
    except PydanticValidationError as exc:
        missing = sorted(
            {
                str(error["loc"][0]).upper()
                for error in exc.errors()
                if error["type"] == "missing" and error["loc"]
            }
        )
        if not missing:
            raise
        raise ConfigurationError(missing) from exc
    blank = blank_required_fields(settings)
    if blank:
        raise ConfigurationError(blank)
    return settings


def ensure_app() -> FastAPI:
    """Build the app once per process and return the cached instance."""
    global _app  # noqa: PLW0603
    if _app is not None:
        return _app
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("Configuration invalid: %s", exc.detail)
        _app = create_configuration_error_app(exc)
        return _app
    logger.info(
        "Initializing application", extra={"environment": settings.environment}
    )
    _app = create_app(build_container(settings))
    return _app


def reset() -> None:
    """Drop the cached app so the next call rebuilds it."""
    global _app  # noqa: PLW0603
    _app = None
