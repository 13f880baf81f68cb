"""
Errors raised by the authorization layer.

Two kinds, kept deliberately apart:

- ContractViolation: the caller did something wrong (unknown capability,
  malformed principal, missing payload). Not actionable by the end user;
  support traces it through `error_id`.
- AuthorizationDenied: the user is not allowed through a route gate.
  Carries a stable `error_unique_code` and a hint naming the capability.

Projection functions never raise either for a negative decision; they
return an empty result instead.
"""

from __future__ import annotations

import uuid
from typing import Any

from featureguard.config import get_settings


class FeatureGuardError(Exception):
    """Base error with the fields every response body carries."""

    name = "FeatureGuardError"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        action: str | None = None,
        context: dict[str, Any] | None = None,
        error_unique_code: str | None = None,
        error_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.action = action
        self.context = context or {}
        self.error_unique_code = error_unique_code
        self.error_id = error_id or str(uuid.uuid4())

    def to_response(self) -> dict[str, Any]:
        """Public JSON body. `context` stays server side."""
        return {
            "name": self.name,
            "message": self.message,
            "action": self.action,
            "status_code": self.http_status,
            "error_id": self.error_id,
            "error_unique_code": self.error_unique_code,
        }


class ContractViolation(FeatureGuardError):
    """Malformed invocation: wrong token, bad principal, missing payload."""

    name = "ValidationError"
    http_status = 400

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("action", get_settings().support_action)
        super().__init__(message, **kwargs)


class AuthorizationDenied(FeatureGuardError):
    """The principal lacks the capability a route requires."""

    name = "ForbiddenError"
    http_status = 403
