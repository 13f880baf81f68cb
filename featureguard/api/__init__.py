"""
FastAPI glue for the authorization layer.

Usage at startup:
    app = FastAPI()
    install(app)
"""

from fastapi import FastAPI

from featureguard.api.error_handlers import register_error_handlers
from featureguard.integrations.sentry import init_sentry
from featureguard.logging_config import configure_logging


def install(app: FastAPI, *, configure_logs: bool = True) -> FastAPI:
    """Set up logging, error tracking and error handlers for an app."""
    if configure_logs:
        configure_logging()
    init_sentry()
    register_error_handlers(app)
    return app


__all__ = ["install", "register_error_handlers"]
