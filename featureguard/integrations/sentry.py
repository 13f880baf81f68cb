# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   Copy the project DSN to .env: FEATUREGUARD_SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   Call init_sentry() at app startup. Contract violations are then reported
#   with their error_id so support can find them from a user's error body.
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from featureguard.config import get_settings
from featureguard.errors import AuthorizationDenied

logger = logging.getLogger(__name__)


def init_sentry() -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    settings = get_settings()

    if not settings.sentry_dsn:
        logger.info("FEATUREGUARD_SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        integrations=[
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        # Don't send PII by default
        send_default_pii=False,
        before_send=_filter_events,
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Drop expected denials; they are user-facing, not bugs."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, AuthorizationDenied):
            return None

    if "request" in event:
        headers = event["request"].get("headers") or {}
        for key in list(headers.keys()):
            if key.lower() in ("authorization", "cookie", "x-api-key"):
                headers[key] = "[Filtered]"

    return event


def is_enabled() -> bool:
    return sentry_sdk.is_initialized()


def capture_exception(error: Exception, **context) -> str | None:
    """
    Capture an exception to Sentry.

    Returns the event ID if captured, None otherwise.
    """
    if not is_enabled():
        logger.error("Error (Sentry disabled): %s", error, exc_info=error)
        return None

    with sentry_sdk.new_scope() as scope:
        error_id = getattr(error, "error_id", None)
        if error_id:
            scope.set_tag("error_id", error_id)
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)
