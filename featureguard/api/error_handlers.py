"""
Error handlers - render authorization errors as JSON responses.

- ContractViolation → 400, reported to Sentry (a caller is broken)
- AuthorizationDenied → 403, logged only (an expected outcome)

Both bodies carry `error_id` so a user can quote it to support.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from featureguard.errors import ContractViolation, FeatureGuardError
from featureguard.integrations.sentry import capture_exception

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the authorization error handler on a FastAPI app."""

    @app.exception_handler(FeatureGuardError)
    async def feature_guard_error_handler(request: Request, exc: FeatureGuardError):
        if isinstance(exc, ContractViolation):
            capture_exception(exc, path=request.url.path, context=exc.context)
        else:
            logger.info(
                f"{exc.name} on {request.url.path}",
                extra={"error_id": exc.error_id, "error_unique_code": exc.error_unique_code},
            )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())
