"""
Policies - the route-level gate.

Just use: `principal = Depends(require("read:user"))`

Design:
- The authentication layer stores the principal on `request.state`
  (attribute name from settings, "principal" by default)
- `require()` returns a FastAPI dependency bound to one capability
- If denied, raises AuthorizationDenied (rendered as 403 by the error handlers)
- If allowed, returns the principal for the route to use

This is the only place a negative decision becomes a user-visible failure.
Decisions here never look at a resource; instance-level checks belong in
the handler via `can(principal, capability, resource)`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import Request

from featureguard.authorization import can
from featureguard.capabilities import Capability
from featureguard.config import get_settings
from featureguard.errors import AuthorizationDenied
from featureguard.guard import validate_capability
from featureguard.principal import principal_id

logger = logging.getLogger(__name__)

FEATURE_NOT_FOUND = "MODEL:AUTHORIZATION:CAN_REQUEST:FEATURE_NOT_FOUND"


def get_principal(request: Request) -> Any:
    """
    The principal stored on the request by the authentication layer.

    Returns None when nothing was stored; the guard in `can()` turns that
    into a ContractViolation.
    """
    return getattr(request.state, get_settings().principal_state_attr, None)


def check_request(principal: Any, capability: Capability | str) -> Any:
    """
    Gate a request on one capability.

    Returns the principal when allowed, raises AuthorizationDenied otherwise.
    """
    if not can(principal, capability):
        token = Capability(capability).value
        logger.info(
            "authorization.denied capability=%s principal=%s",
            token,
            principal_id(principal),
        )
        raise AuthorizationDenied(
            "User cannot perform this operation.",
            action=f'Check that this user has the capability "{token}".',
            error_unique_code=FEATURE_NOT_FOUND,
        )
    return principal


def require(capability: Capability | str) -> Callable[[Request], Any]:
    """
    Require a capability to access a route.

    Usage:
        @app.get("/users")
        async def list_users(principal = Depends(require("read:user:list"))):
            users = await storage.users.all()
            return filter_output(principal, "read:user:list", users)

    Or, when the handler doesn't need the principal:
        @app.post("/migrations", dependencies=[Depends(require("create:migration"))])
    """
    validate_capability(capability)

    def dependency(request: Request) -> Any:
        return check_request(get_principal(request), capability)

    dependency.__name__ = f"require_{Capability(capability).name.lower()}"
    return dependency
